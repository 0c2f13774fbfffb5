from unittest import mock

import requests
from django.test import SimpleTestCase

from apps.listings.company_facts import CompanyFactsService, extract_domain

WIKI_URL = 'https://en.wikipedia.org/api/rest_v1/page/summary/Acme'
WIKI_SUMMARY = {
    'extract': 'Acme is a software company building partner ecosystems. '
               'It is headquartered in Dublin. It has 1,200 employees.',
    'content_urls': {'desktop': {'page': 'https://en.wikipedia.org/wiki/Acme'}},
}
HOMEPAGE = """
<html><head><meta name="description" content="Acme helps teams run partner programs."></head>
<body><a href="/jobs">Jobs</a> <a class="nav" href="https://partners.acme.io">Partners</a></body></html>
"""


def page(ok=True, text='', payload=None):
    return mock.Mock(ok=ok, text=text, json=mock.Mock(return_value=payload or {}))


def offline(url, **kwargs):
    raise requests.ConnectionError('offline')


class ExtractDomainTest(SimpleTestCase):
    def test_domains(self):
        self.assertEqual(extract_domain('https://www.Acme.io/about'), 'acme.io')
        self.assertEqual(extract_domain('acme.io'), 'acme.io')
        self.assertEqual(extract_domain('http://careers.acme.io'), 'careers.acme.io')

    def test_names_are_not_domains(self):
        self.assertIsNone(extract_domain('Acme Corp'))
        self.assertIsNone(extract_domain('Stripe'))
        self.assertIsNone(extract_domain(''))
        self.assertIsNone(extract_domain(None))


class CompanyFactsServiceTest(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.service = CompanyFactsService(session=self.session)

    def test_sources_in_order(self):
        pages = {
            WIKI_URL: page(payload=WIKI_SUMMARY),
            'https://acme.io/company': page(ok=False),
            'https://acme.io': page(text=HOMEPAGE),
        }

        def get(url, **kwargs):
            if url not in pages:
                raise requests.ConnectionError('refused')
            return pages[url]

        self.session.get.side_effect = get

        facts = self.service.fetch('Acme', 'https://www.acme.io', {
            'location': 'Hybrid - Austin, TX',
            'companyStage': 'Series B',
            'companySize': '51-200',
        })

        self.assertEqual(facts['companyId'], 'acme')
        self.assertEqual(facts['oneLine'], 'Acme is a software company building partner ecosystems')
        self.assertEqual(facts['hq'], 'Dublin')
        self.assertEqual(facts['headcount'], 1200)
        self.assertEqual(facts['workModel'], 'Hybrid')
        self.assertEqual(facts['fundingStage'], 'Series B')
        self.assertEqual(facts['links'], {
            'careers': 'https://acme.io/jobs',
            'trust': None,
            'partners': 'https://partners.acme.io',
        })
        self.assertEqual(facts['sources'], {
            'oneLine': 'Wikipedia',
            'headcount': 'Wikipedia',
            'hq': 'Wikipedia',
            'fundingStage': 'Job posting',
        })
        requested = [c.args[0] for c in self.session.get.call_args_list]
        self.assertNotIn('https://acme.io/about-us', requested)
        self.assertEqual(self.session.get.call_args_list[1].kwargs['timeout'], 5)

    def test_website_fills_in_when_wikipedia_is_silent(self):
        pages = {WIKI_URL: page(ok=False), 'https://acme.io/about': page(text=HOMEPAGE + ' 85 team members')}
        self.session.get.side_effect = lambda url, **kwargs: pages.get(url, page(ok=False))

        facts = self.service.fetch('Acme', 'acme.io')

        self.assertEqual(facts['oneLine'], 'Acme helps teams run partner programs.')
        self.assertEqual(facts['headcount'], 85)
        self.assertEqual(facts['sources']['oneLine'], 'Company website')

    def test_known_company_without_network(self):
        self.session.get.side_effect = offline

        facts = self.service.fetch('Stripe')

        self.assertEqual(facts['oneLine'], 'Payments and financial infrastructure for the internet.')
        self.assertEqual(facts['sources'], {'oneLine': 'Company database'})
        self.assertEqual(facts['links'], {'careers': None, 'trust': None, 'partners': None})
        self.session.get.assert_called_once()

    def test_unknown_company_gets_generic_sentence(self):
        self.session.get.side_effect = offline

        facts = self.service.fetch('Nimbus Labs', 'https://nimbus.dev', {'isRemote': True, 'companySize': '11-50'})

        self.assertEqual(facts['companyId'], 'nimbus-labs')
        self.assertEqual(facts['oneLine'], 'Nimbus Labs is a technology company focused on partnership '
                                           'development and strategic alliances.')
        self.assertEqual(facts['workModel'], 'Remote-first')
        self.assertEqual(facts['headcount'], 30)
        self.assertEqual(facts['links']['careers'], 'https://nimbus.dev/careers')
        self.assertEqual(facts['links']['partners'], 'https://nimbus.dev/partners')

    def test_work_model_from_location(self):
        facts = {'workModel': None, 'hq': None, 'headcount': None, 'sources': {}}
        CompanyFactsService._apply_job_data(facts, {'location': 'Remote (US)'})
        self.assertEqual(facts['workModel'], 'Remote-eligible')

        facts = {'workModel': None, 'hq': None, 'headcount': None, 'sources': {}}
        CompanyFactsService._apply_job_data(facts, {'location': 'New York, NY'})
        self.assertEqual(facts['workModel'], 'Onsite')
        self.assertEqual(facts['hq'], 'New York, NY')
