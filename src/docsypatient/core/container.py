"""
Dependency injection container for the patient client.

Wires storage, the session store, the HTTP stack and the API client so that
each process has exactly one of each.
"""

from typing import Any, Callable, Dict, Optional

from .config import Settings, get_settings
from .exceptions import ConfigurationError


class Container:
    """Lightweight dependency injection container."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._singletons: Dict[str, Any] = {}
        self.settings = settings or get_settings()

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[name] = instance

    def register_factory(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a factory function."""
        self._factories[name] = factory

    def get(self, name: str) -> Any:
        """Get a service by name."""
        if name in self._singletons:
            return self._singletons[name]

        if name in self._factories:
            instance = self._factories[name]()
            # Cache as singleton if it's a factory
            self._singletons[name] = instance
            return instance

        raise ConfigurationError(f"Service '{name}' not found")

    def has(self, name: str) -> bool:
        """Check if a service is registered."""
        return name in self._factories or name in self._singletons

    def clear(self) -> None:
        """Clear all registered services."""
        self._factories.clear()
        self._singletons.clear()

    # Typed accessors for the common services

    @property
    def session_store(self):
        store = self.get(ServiceNames.SESSION_STORE)
        if store.profile_directory is None:
            # Creating the API client attaches it as the profile directory
            self.get(ServiceNames.PATIENT_API)
        return store

    @property
    def auth_client(self):
        return self.get(ServiceNames.AUTH_CLIENT)

    @property
    def api(self):
        return self.get(ServiceNames.PATIENT_API)

    def create_loader(self, resource):
        """New loader for one list screen of ``resource``."""
        from ..application.pagination.loader import PaginatedLoader

        return PaginatedLoader(
            self.api.page_fetcher(resource),
            page_size=self.settings.api.page_size,
            name=resource.value,
        )

    async def close(self) -> None:
        """Release the HTTP session if one was opened."""
        if ServiceNames.TRANSPORT in self._singletons:
            await self._singletons[ServiceNames.TRANSPORT].close()


class ServiceNames:
    """Service names registered by build_container."""

    STORAGE = "storage"
    EVENT_BUS = "event_bus"
    SESSION_STORE = "session_store"
    TRANSPORT = "transport"
    AUTH_CLIENT = "auth_client"
    GATEWAY = "gateway"
    PATIENT_API = "patient_api"


def _create_storage(settings: Settings):
    from ..adapters.storage import InMemoryKeyValueStore, JsonFileKeyValueStore

    if settings.storage.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(settings.storage.resolved_path)


def build_container(settings: Optional[Settings] = None, storage: Any = None) -> Container:
    """Register every client service; ``storage`` overrides the configured backend."""
    from ..adapters.api.patient_api import PatientApiClient
    from ..adapters.http.auth_client import AuthClient
    from ..adapters.http.auth_gateway import AuthGateway
    from ..adapters.http.transport import HttpTransport
    from ..application.session_store import SessionStore
    from ..domain.events import ProfileEventBus

    container = Container(settings)
    settings = container.settings

    if storage is not None:
        container.register_singleton(ServiceNames.STORAGE, storage)
    else:
        container.register_factory(ServiceNames.STORAGE, lambda: _create_storage(settings))
    container.register_factory(ServiceNames.EVENT_BUS, ProfileEventBus)
    container.register_factory(
        ServiceNames.SESSION_STORE,
        lambda: SessionStore(
            container.get(ServiceNames.STORAGE),
            event_bus=container.get(ServiceNames.EVENT_BUS),
            key_prefix=settings.storage.key_prefix,
            strict_membership=settings.profile.strict_membership,
        ),
    )
    container.register_factory(ServiceNames.TRANSPORT, lambda: HttpTransport(settings.api))
    container.register_factory(
        ServiceNames.AUTH_CLIENT,
        lambda: AuthClient(container.get(ServiceNames.TRANSPORT), container.get(ServiceNames.SESSION_STORE)),
    )
    container.register_factory(
        ServiceNames.GATEWAY,
        lambda: AuthGateway(
            container.get(ServiceNames.TRANSPORT),
            container.get(ServiceNames.SESSION_STORE),
            container.get(ServiceNames.AUTH_CLIENT),
        ),
    )

    def _create_api() -> PatientApiClient:
        api = PatientApiClient(container.get(ServiceNames.GATEWAY), container.get(ServiceNames.SESSION_STORE))
        # The store bootstraps profiles through the API client
        container.get(ServiceNames.SESSION_STORE).profile_directory = api
        return api

    container.register_factory(ServiceNames.PATIENT_API, _create_api)
    return container


_container: Optional[Container] = None


def get_container() -> Container:
    """Get the global container instance (built on first use)."""
    global _container
    if _container is None:
        _container = build_container()
    return _container
