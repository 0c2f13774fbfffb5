from functools import lru_cache

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

from .base import Row, StoreError, TabularStore

__all__ = ["Row", "StoreError", "TabularStore", "get_store"]


@lru_cache(maxsize=None)
def get_store() -> TabularStore:
    """Build the ``TRACKING_STORE`` backend once per process."""
    conf = settings.TRACKING_STORE
    backend = import_string(conf["BACKEND"])
    return backend(**conf.get("OPTIONS", {}))


@receiver(setting_changed)
def reset_store(*, setting, **kwargs):
    if setting == "TRACKING_STORE":
        get_store.cache_clear()
