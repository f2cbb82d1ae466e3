"""
Services package for the Courtside rotation tracker.

This package contains the engines and the service classes around them:
persistence adapters, the repository, notifications and report building.
"""
from .accrual_engine import LiveGameEngine
from .ticker import ClockTicker
from .live_session import LiveSession, LiveSessionRegistry
from .document_store import (
    DocumentStore, DocumentStoreError, InMemoryDocumentStore,
    JsonFileDocumentStore, HttpDocumentStore, document_path
)
from .repository import CourtsideRepository, ValidationError
from .notifications import (
    Notification, Notifier, LoggingNotifier, CollectingNotifier
)
from .identity import IdentityProvider, StaticIdentityProvider, HeaderIdentityProvider
from .plan_engine import (
    SubstitutionPlanEngine, PlanPersistenceService, PersistPeriodPlan,
    build_plan, derive_period_times
)
from .tournament_service import (
    TournamentService, ReportExporter, calculate_match_times, aggregate_match_times
)
from .service_factory import ServiceFactory, create_document_store

__all__ = [
    "LiveGameEngine", "ClockTicker", "LiveSession", "LiveSessionRegistry",
    "DocumentStore", "DocumentStoreError", "InMemoryDocumentStore",
    "JsonFileDocumentStore", "HttpDocumentStore", "document_path",
    "CourtsideRepository", "ValidationError",
    "Notification", "Notifier", "LoggingNotifier", "CollectingNotifier",
    "IdentityProvider", "StaticIdentityProvider", "HeaderIdentityProvider",
    "SubstitutionPlanEngine", "PlanPersistenceService", "PersistPeriodPlan",
    "build_plan", "derive_period_times",
    "TournamentService", "ReportExporter", "calculate_match_times", "aggregate_match_times",
    "ServiceFactory", "create_document_store"
]
