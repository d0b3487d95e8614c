from functools import lru_cache
import logging
import random
from zoneinfo import ZoneInfo

from detailerdash.core.config import settings
from detailerdash.application.ports.availability import AvailabilityPolicy
from detailerdash.application.ports.key_value_store import KeyValueStorePort
from detailerdash.application.ports.notifications import NotificationSinkPort
from detailerdash.application.ports.service_catalog import ServiceCatalogPort
from detailerdash.application.use_cases.booking_ledger import BookingLedger
from detailerdash.application.use_cases.slot_calendar import SlotCalendar
from detailerdash.infrastructure.availability.policies import LedgerAvailabilityPolicy, RandomAvailabilityPolicy
from detailerdash.infrastructure.catalog.service_catalog_store import StaticServiceCatalog, StoredServiceCatalog
from detailerdash.infrastructure.notifications.sinks import LoggingNotificationSink, WebhookNotificationSink
from detailerdash.infrastructure.store.json_store import JsonFileKeyValueStore
from detailerdash.infrastructure.store.memory_store import MemoryKeyValueStore
from detailerdash.infrastructure.store.session_registry import SessionRegistry


_store: KeyValueStorePort | None = None
_ledger: BookingLedger | None = None
_session_registry: SessionRegistry | None = None


def _seeded_rng() -> random.Random | None:
    if settings.RANDOM_SEED is None:
        return None
    return random.Random(settings.RANDOM_SEED)


def get_store() -> KeyValueStorePort:
    global _store
    if _store is None:
        if settings.STORE_PROVIDER.lower() == "json":
            _store = JsonFileKeyValueStore(data_dir=settings.DATA_DIR)
        else:
            _store = MemoryKeyValueStore()
    return _store


@lru_cache
def get_notifier() -> NotificationSinkPort:
    logger = logging.getLogger(__name__)
    if settings.NOTIFY_WEBHOOK_URL:
        logger.info("Using WebhookNotificationSink")
        return WebhookNotificationSink(url=settings.NOTIFY_WEBHOOK_URL, timeout=settings.NOTIFY_TIMEOUT_SECONDS)
    return LoggingNotificationSink()


def get_ledger() -> BookingLedger:
    global _ledger
    if _ledger is None:
        _ledger = BookingLedger(
            store=get_store(),
            notifier=get_notifier(),
            store_key=settings.LEDGER_STORE_KEY,
        )
    return _ledger


def get_service_catalog() -> ServiceCatalogPort:
    if settings.CATALOG_PROVIDER.lower() == "store":
        return StoredServiceCatalog(store=get_store())
    return StaticServiceCatalog()


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_base_availability() -> AvailabilityPolicy:
    return RandomAvailabilityPolicy(rng=_seeded_rng(), ratio=settings.SLOT_AVAILABILITY_RATIO)


def get_calendar(business_id: str) -> SlotCalendar:
    policy = LedgerAvailabilityPolicy(get_ledger(), business_id, base=get_base_availability())
    return SlotCalendar(
        policy=policy,
        timezone=get_timezone(),
        open_hour=settings.OPEN_HOUR,
        close_hour=settings.CLOSE_HOUR,
        granularity_minutes=settings.SLOT_GRANULARITY_MINUTES,
    )


def get_session_registry() -> SessionRegistry:
    global _session_registry
    if _session_registry is None:
        _session_registry = SessionRegistry(
            rng_factory=_seeded_rng,
            idle_ttl_seconds=settings.ASSISTANT_SESSION_TTL_SECONDS,
        )
    return _session_registry
