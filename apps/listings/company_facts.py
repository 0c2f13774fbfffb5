# apps/listings/company_facts.py
import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import quote, urlparse

import requests
from django.utils import timezone

logger = logging.getLogger(__name__)

WIKIPEDIA_SUMMARY_URL = 'https://en.wikipedia.org/api/rest_v1/page/summary/{title}'
WIKIPEDIA_USER_AGENT = 'PartnershipsCareers/1.0 (https://partnerships-careers.com)'
SCRAPER_USER_AGENT = 'Mozilla/5.0 (compatible; PartnershipsCareers/1.0; +https://partnerships-careers.com)'

HEADCOUNT_RE = re.compile(r'(\d{1,3}(?:,\d{3})*)\s*(?:employees|staff|people|team members)', re.IGNORECASE)
HQ_RE = re.compile(r'(?:based|headquartered|located)\s+(?:in\s+)?([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)', re.IGNORECASE)
SENTENCE_RE = re.compile(r'[.!?]+')
META_DESCRIPTION_RE = re.compile(r'<meta\s+name=["\']description["\']\s+content=["\']([^"\']+)["\']', re.IGNORECASE)
OG_DESCRIPTION_RE = re.compile(r'<meta\s+property=["\']og:description["\']\s+content=["\']([^"\']+)["\']', re.IGNORECASE)
CAREERS_LINK_RE = re.compile(r'<a[^>]+href=["\']([^"\']*(?:career|job|hiring)[^"\']*)["\'][^>]*>', re.IGNORECASE)
PARTNERS_LINK_RE = re.compile(r'<a[^>]+href=["\']([^"\']*partner[^"\']*)["\'][^>]*>', re.IGNORECASE)

SIZE_BAND_HEADCOUNT = {
    '1-10': 5,
    '11-50': 30,
    '51-200': 125,
    '201-500': 350,
    '501-1000': 750,
    '1001-2000': 1500,
    '2000-5000': 3500,
    '5000+': 10000,
}

KNOWN_COMPANIES = {
    'stripe': 'Payments and financial infrastructure for the internet.',
    'cloudinary': 'Cloud-based image and video management platform.',
    'palo alto networks': 'Global cybersecurity leader providing advanced security solutions.',
    'zscaler': 'Cloud security platform providing secure access to applications.',
    'databricks': 'Unified analytics platform built on Apache Spark.',
    'snowflake': 'Cloud data platform for data warehousing and analytics.',
    'mongodb': 'General purpose database platform.',
    'okta': 'Identity and access management platform.',
    'twilio': 'Cloud communications platform for building customer engagement.',
    'auth0': 'Identity and access management platform.',
    'vercel': 'Platform for frontend developers and teams.',
    'shopify': 'E-commerce platform for online stores and retail point-of-sale systems.',
    'notion': 'All-in-one workspace for notes, docs, and collaboration.',
    'figma': 'Collaborative interface design tool.',
    'elastic': 'Search and data analytics platform.',
    'github': 'Code hosting platform for version control and collaboration.',
    'confluent': 'Event streaming platform built on Apache Kafka.',
    'segment': 'Customer data platform for collecting and routing customer data.',
}


def extract_domain(url_or_name) -> Optional[str]:
    """``https://www.acme.io/about`` -> ``acme.io``; names without a dot give ``None``."""
    value = (url_or_name or '').strip()
    if not value or ' ' in value:
        return None
    if not value.startswith(('http://', 'https://')):
        value = f'https://{value}'
    host = (urlparse(value).hostname or '').lower()
    if host.startswith('www.'):
        host = host[4:]
    return host if '.' in host else None


def _absolute(href, base_url):
    if href.startswith('http'):
        return href
    return f"{base_url}{'' if href.startswith('/') else '/'}{href}"


def _headcount(text):
    match = HEADCOUNT_RE.search(text or '')
    return int(match.group(1).replace(',', '')) if match else None


class CompanyFactsService:
    """Best-effort company "fast facts"; every remote source may fail silently."""

    def __init__(self, session=None, timeout=5):
        self.session = session or requests.Session()
        self.timeout = timeout

    def wikipedia_summary(self, company_name) -> Dict[str, Any]:
        url = WIKIPEDIA_SUMMARY_URL.format(title=quote(company_name, safe=''))
        try:
            response = self.session.get(url, headers={'User-Agent': WIKIPEDIA_USER_AGENT}, timeout=self.timeout)
            if not response.ok:
                return {}
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.info(f"Wikipedia lookup failed for {company_name}: {str(e)}")
            return {}

        extract = data.get('extract') or ''
        if not extract:
            return {}

        result = {'description': SENTENCE_RE.split(extract)[0].strip() or extract[:150]}
        headcount = _headcount(extract)
        if headcount:
            result['headcount'] = headcount
        if ((data.get('content_urls') or {}).get('desktop') or {}).get('page'):
            hq = HQ_RE.search(extract)
            if hq:
                result['hq'] = hq.group(1)
        return result

    def scrape_website(self, domain) -> Dict[str, Any]:
        base_url = f'https://{domain}'
        result = {}
        for url in (f'{base_url}/about', f'{base_url}/company', base_url, f'{base_url}/about-us'):
            try:
                response = self.session.get(
                    url, headers={'User-Agent': SCRAPER_USER_AGENT, 'Accept': 'text/html'}, timeout=self.timeout,
                )
            except requests.RequestException:
                continue
            if not response.ok:
                continue

            html = response.text
            for pattern in (META_DESCRIPTION_RE, OG_DESCRIPTION_RE):
                match = pattern.search(html)
                if match and not result.get('description'):
                    result['description'] = match.group(1)[:150]

            careers = CAREERS_LINK_RE.search(html)
            if careers:
                result['careersUrl'] = _absolute(careers.group(1), base_url)
            partners = PARTNERS_LINK_RE.search(html)
            if partners:
                result['partnersUrl'] = _absolute(partners.group(1), base_url)
            headcount = _headcount(html)
            if headcount:
                result['headcount'] = headcount

            if result.get('description'):
                break
        return result

    def fetch(self, company_name, company_website=None, job_data=None) -> Dict[str, Any]:
        facts = {
            'companyId': re.sub(r'[^a-z0-9]', '-', company_name.lower()),
            'name': company_name,
            'oneLine': '',
            'headcount': None,
            'fundingStage': None,
            'totalFundingUsd': None,
            'hq': None,
            'workModel': None,
            'timezonePolicy': None,
            'notableCustomers': [],
            'glassdoorRating': None,
            'lastNews': None,
            'links': {'careers': None, 'trust': None, 'partners': None},
            'sources': {},
            'lastRefreshed': timezone.now().isoformat(),
        }
        domain = extract_domain(company_website or company_name)

        wiki = self.wikipedia_summary(company_name)
        self._merge(facts, wiki, 'Wikipedia')

        if domain:
            scraped = self.scrape_website(domain)
            self._merge(facts, scraped, 'Company website')
            facts['links']['careers'] = scraped.get('careersUrl') or facts['links']['careers']
            facts['links']['partners'] = scraped.get('partnersUrl') or facts['links']['partners']

        if job_data:
            self._apply_job_data(facts, job_data)

        if not facts['oneLine']:
            known = KNOWN_COMPANIES.get(company_name.lower())
            if known:
                facts['oneLine'] = known
                facts['sources']['oneLine'] = 'Company database'
            else:
                facts['oneLine'] = (f'{company_name} is a technology company focused on partnership '
                                    'development and strategic alliances.')

        if domain:
            facts['links']['careers'] = facts['links']['careers'] or f'https://{domain}/careers'
            facts['links']['partners'] = facts['links']['partners'] or f'https://{domain}/partners'
        return facts

    @staticmethod
    def _merge(facts, found, source):
        for key, target in (('description', 'oneLine'), ('headcount', 'headcount'), ('hq', 'hq')):
            if found.get(key) and not facts[target]:
                facts[target] = found[key]
                facts['sources'][target] = source

    @staticmethod
    def _apply_job_data(facts, job_data):
        location = (job_data.get('location') or '').strip()
        if job_data.get('isRemote'):
            facts['workModel'] = 'Remote-first'
        elif location:
            lowered = location.lower()
            if 'hybrid' in lowered:
                facts['workModel'] = 'Hybrid'
            elif 'remote' in lowered:
                facts['workModel'] = 'Remote-eligible'
            else:
                facts['workModel'] = 'Onsite'

        if location and not facts['hq']:
            facts['hq'] = location
            facts['sources']['hq'] = 'Job posting'

        if job_data.get('companyStage'):
            facts['fundingStage'] = job_data['companyStage']
            facts['sources']['fundingStage'] = 'Job posting'

        headcount = SIZE_BAND_HEADCOUNT.get(job_data.get('companySize'))
        if headcount and not facts['headcount']:
            facts['headcount'] = headcount
            facts['sources']['headcount'] = 'Job posting'
