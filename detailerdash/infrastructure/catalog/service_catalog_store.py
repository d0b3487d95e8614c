from __future__ import annotations

import logging

from detailerdash.application.exceptions import PersistenceError
from detailerdash.application.ports.key_value_store import KeyValueStorePort
from detailerdash.application.ports.service_catalog import ServiceCatalogPort
from detailerdash.application.utils.codec import decode_services
from detailerdash.domain.entities.service import Service
from detailerdash.infrastructure.catalog.service_catalog_data import DEMO_SERVICES


class StaticServiceCatalog(ServiceCatalogPort):
    def __init__(
        self,
        catalogs: dict[str, list[Service]] | None = None,
        default: list[Service] | None = None,
    ) -> None:
        self._catalogs = {business_id: list(services) for business_id, services in (catalogs or {}).items()}
        self._default = list(DEMO_SERVICES if default is None else default)

    def list_services(self, business_id: str) -> list[Service]:
        return list(self._catalogs.get(business_id, self._default))


class StoredServiceCatalog(ServiceCatalogPort):
    """Reads the catalog a business saved under ``services.profile.<business_id>``."""

    def __init__(self, store: KeyValueStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def storage_key(business_id: str) -> str:
        return f"services.profile.{business_id}"

    def list_services(self, business_id: str) -> list[Service]:
        raw = self._store.load(self.storage_key(business_id))
        if raw is None:
            return []
        try:
            return decode_services(raw)
        except (ValueError, KeyError, TypeError) as e:
            self._logger.error("Stored catalog is corrupt", extra={"business_id": business_id, "reason": str(e)})
            raise PersistenceError(f"Catalog for {business_id} is corrupt: {e}") from e
