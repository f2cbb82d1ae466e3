"""
Service Factory for dependency injection.

This module builds the store adapter named by the configuration and wires
user-scoped services on top of it.
"""
from typing import Optional

from ..config import AppConfig, ConfigurationError
from .document_store import (
    DocumentStore, HttpDocumentStore, InMemoryDocumentStore, JsonFileDocumentStore
)
from .identity import HeaderIdentityProvider, IdentityProvider
from .notifications import Notifier
from .plan_engine import PlanPersistenceService
from .repository import CourtsideRepository
from .tournament_service import ExportServiceInterface, ReportExporter, TournamentService


def create_document_store(config: AppConfig) -> DocumentStore:
    """Instantiate the configured store backend."""
    if config.store_backend == "memory":
        return InMemoryDocumentStore()
    if config.store_backend == "json":
        return JsonFileDocumentStore(config.data_dir)
    if config.store_backend == "http":
        if not config.store_url:
            raise ConfigurationError("The http store needs a URL")
        return HttpDocumentStore(config.store_url, auth_token=config.store_token)
    raise ConfigurationError(f"Unknown store backend: {config.store_backend}")


class ServiceFactory:
    """
    Factory for creating service instances with their dependencies injected.

    The store and identity provider are shared; repositories and the services
    built on them are per user.
    """

    def __init__(
        self,
        store: DocumentStore,
        identity: Optional[IdentityProvider] = None,
    ):
        self.store = store
        self.identity = identity or HeaderIdentityProvider(default_user_id="local")
        self._exporter: Optional[ExportServiceInterface] = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "ServiceFactory":
        identity = HeaderIdentityProvider(default_user_id=config.default_user_id)
        return cls(create_document_store(config), identity)

    def create_repository(self, user_id: str) -> CourtsideRepository:
        return CourtsideRepository(self.store, user_id)

    def create_plan_persistence_service(
        self, user_id: str, notifier: Notifier
    ) -> PlanPersistenceService:
        return PlanPersistenceService(self.create_repository(user_id), notifier)

    def create_tournament_service(self, user_id: str) -> TournamentService:
        return TournamentService(self.create_repository(user_id))

    def get_exporter(self) -> ExportServiceInterface:
        """Get singleton report exporter."""
        if self._exporter is None:
            self._exporter = ReportExporter()
        return self._exporter
