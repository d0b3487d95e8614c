from __future__ import annotations

from abc import ABC, abstractmethod

from detailerdash.domain.entities.service import Service


class ServiceCatalogPort(ABC):
    @abstractmethod
    def list_services(self, business_id: str) -> list[Service]:
        """List the services offered by a business, in display order."""
        raise NotImplementedError

    def get_service(self, business_id: str, service_id: str) -> Service | None:
        for service in self.list_services(business_id):
            if service.id == service_id:
                return service
        return None
