# apps/listings/repository.py
import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from firebase_admin import firestore

from core.firebase import get_firestore

logger = logging.getLogger(__name__)


class JobRepository:
    """Firestore ``jobs`` and ``featuredJobs`` collections, keyed by job id."""

    jobs_collection = 'jobs'
    featured_collection = 'featuredJobs'

    def __init__(self, db=None):
        self.db = db if db is not None else get_firestore()

    def mark_featured(self, job_id, employer_id=None, amount=None, now=None):
        job_id = str(job_id)
        now = now or timezone.now()
        expires_at = now + timedelta(days=settings.FEATURED_LISTING_DAYS)

        self.db.collection(self.jobs_collection).document(job_id).update({
            'isFeatured': True,
            'featuredExpiryDate': expires_at,
            'status': 'active',
        })
        self.db.collection(self.featured_collection).document(job_id).set({
            'jobId': job_id,
            'employerId': employer_id,
            'featuredAt': firestore.SERVER_TIMESTAMP,
            'expiresAt': expires_at,
            'paid': True,
            'amount': amount,
        })
        logger.info(f"Job {job_id} marked as featured until {expires_at.date().isoformat()}")
        return expires_at

    def upsert(self, job_id, fields):
        self.db.collection(self.jobs_collection).document(str(job_id)).set(fields)
