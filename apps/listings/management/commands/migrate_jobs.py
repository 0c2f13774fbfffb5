import logging
import re
from datetime import datetime, timedelta, timezone as dt_timezone

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone
from tenacity import retry, stop_after_attempt, wait_exponential

from apps.tracking.repositories import get_store
from apps.listings.repository import JobRepository

logger = logging.getLogger(__name__)

CATEGORY_MAP = {
    'Channel & Reseller': 'Channel & Reseller',
    'Channel & Alliances': 'Channel & Reseller',
    'Partner Analytics': 'Technology & ISV',
    'Partner Services': 'Agency & Services',
    'Partner Marketing': 'Strategic Alliances',
    'Partner Management': 'Channel & Reseller',
    'Partner Success': 'Agency & Services',
    'ISV & Marketplace': 'Ecosystem & Marketplace',
    'Strategic Alliances with Hyperscalers/SIs': 'Strategic Alliances',
    'Product & OEM Partnerships': 'Distribution & OEM',
    'Corporate Development & Venture Partnerships': 'Strategic Alliances',
    'Ecosystem & Platform': 'Ecosystem & Marketplace',
}

# checked in order; keywords match whole words so "us" does not hit "australia"
REGION_KEYWORDS = (
    ('EMEA', ('spain', 'europe', 'emea')),
    ('NAmer', ('nyc', 'sf', 'united states', 'usa', 'us', 'canada')),
    ('APAC', ('asia', 'apac', 'australia')),
    ('LATAM', ('latin', 'latam', 'mexico', 'brazil')),
    ('Global', ('remote', 'global', 'unspecified')),
)

TRUE_VALUES = (True, 'TRUE', 'true', 'True')


def map_category(category):
    return CATEGORY_MAP.get(category, 'Channel & Reseller')


def map_region(location):
    text = (location or '').lower()
    for region, keywords in REGION_KEYWORDS:
        if any(re.search(rf'\b{re.escape(keyword)}\b', text) for keyword in keywords):
            return region
    return 'NAmer'


def parse_sheet_date(value):
    """``MM/DD/YYYY`` (sheet format) or ISO-8601; blank means now."""
    if not value:
        return timezone.now()
    value = str(value).strip()
    for fmt in ('%m/%d/%Y', '%Y-%m-%d'):
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=dt_timezone.utc)
        except ValueError:
            continue
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=dt_timezone.utc)


def featured_expiry(value, posted_at):
    """A number of days after posting, an explicit date, or the default listing period."""
    if value in (None, ''):
        return posted_at + timedelta(days=settings.FEATURED_LISTING_DAYS)
    if str(value).strip().isdigit():
        return posted_at + timedelta(days=int(value))
    return parse_sheet_date(value)


def _count(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def to_firestore_job(row):
    posted_at = parse_sheet_date(row.get('postedDate'))
    job = {
        'title': row.get('title'),
        'company': row.get('company'),
        'location': row.get('location') or 'Unspecified',
        'type': row.get('type') or 'Full-Time',
        'salaryRange': row.get('salaryRange') or 'Unspecified',
        'level': row.get('level'),
        'category': map_category(row.get('category')),
        'region': row.get('region') or map_region(row.get('location')),
        'description': row.get('description') or '',
        'postedDate': posted_at,
        'isFeatured': row.get('isFeatured') in TRUE_VALUES,
        'totalViews': _count(row.get('totalViews')),
        'totalClicks': _count(row.get('totalClicks')),
        'status': row.get('status') or 'active',
        'employerId': row.get('employerId') or 'unknown',
        'link': row.get('link'),
        'createdAt': posted_at,
    }
    if job['isFeatured']:
        job['featuredExpiryDate'] = featured_expiry(row.get('featuredExpiryDate'), posted_at)
    return job


@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=4), reraise=True)
def save_job(repository, job_id, job):
    repository.upsert(job_id, job)


class Command(BaseCommand):
    help = 'Copy job rows from the spreadsheet into the Firestore jobs collection'

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help='Show the mapped jobs without writing them')
        parser.add_argument('--table', default='sheet1', help='Sheet holding the job rows')

    def handle(self, *args, **options):
        rows = get_store().list_all(options['table'])
        self.stdout.write(f'Found {len(rows)} job rows in {options["table"]}')

        repository = None if options['dry_run'] else JobRepository()
        migrated, failed = 0, 0

        for row in rows:
            job_id = row.get('id')
            try:
                job = to_firestore_job(row)
                if repository is None:
                    self.stdout.write(f'[dry-run] {job_id}: {job["title"]} at {job["company"]} '
                                      f'({job["category"]}, {job["region"]})')
                else:
                    save_job(repository, job_id, job)
                    self.stdout.write(f'Migrated {job_id}: {job["title"]} at {job["company"]}')
                migrated += 1
            except Exception as e:
                logger.error(f"Error migrating job {job_id}: {str(e)}")
                self.stderr.write(f'Failed {job_id}: {str(e)}')
                failed += 1

        summary = f'Migration complete: {migrated} migrated, {failed} failed'
        self.stdout.write(self.style.SUCCESS(summary) if not failed else self.style.WARNING(summary))
