# apps/alerts/repository.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from django.utils import timezone

from core.firebase import get_firestore

logger = logging.getLogger(__name__)


def normalize_email(email):
    return (email or '').strip().lower()


def now_iso():
    return timezone.now().isoformat()


@dataclass
class JobAlert:
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def email(self):
        return self.data.get('email', '')

    @property
    def frequency(self):
        return self.data.get('frequency')

    @property
    def customer_id(self):
        return self.data.get('stripeCustomerId')

    @property
    def subscription_id(self):
        return self.data.get('stripeSubscriptionId')


class JobAlertRepository:
    """Firestore ``jobAlerts`` collection; one document per subscriber e-mail."""

    collection_name = 'jobAlerts'

    def __init__(self, db=None):
        self.db = db if db is not None else get_firestore()

    @property
    def collection(self):
        return self.db.collection(self.collection_name)

    def get(self, alert_id) -> Optional[JobAlert]:
        snapshot = self.collection.document(alert_id).get()
        if not snapshot.exists:
            return None
        return JobAlert(snapshot.id, snapshot.to_dict() or {})

    def find_by_email(self, email) -> Optional[JobAlert]:
        docs = self.collection.where('email', '==', normalize_email(email)).limit(1).get()
        for snapshot in docs:
            return JobAlert(snapshot.id, snapshot.to_dict() or {})
        return None

    def create(self, fields) -> JobAlert:
        _, ref = self.collection.add(fields)
        logger.info(f"Created job alert {ref.id} ({fields.get('frequency')})")
        return JobAlert(ref.id, dict(fields))

    def update(self, alert_id, fields):
        self.collection.document(alert_id).update(fields)

    def find_or_create_pending(self, email) -> JobAlert:
        """Existing alert for ``email``, or a new inactive realtime one awaiting payment."""
        alert = self.find_by_email(email)
        if alert is not None:
            return alert
        timestamp = now_iso()
        return self.create({
            'email': normalize_email(email),
            'frequency': 'realtime',
            'subscribedAt': timestamp,
            'updatedAt': timestamp,
            'isActive': False,
            'paymentPending': True,
        })

    def activate_realtime(self, alert_id, customer_id=None, subscription_id=None):
        self.update(alert_id, {
            'frequency': 'realtime',
            'isActive': True,
            'paymentPending': False,
            'stripeCustomerId': customer_id,
            'stripeSubscriptionId': subscription_id,
            'updatedAt': now_iso(),
        })
        logger.info(f"Realtime alerts activated for {alert_id}")

    def deactivate(self, alert_id):
        self.update(alert_id, {
            'isActive': False,
            'unsubscribedAt': now_iso(),
        })
