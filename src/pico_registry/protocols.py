"""Capabilities the container calls into.

``ServiceFactory`` and ``ServiceConfigurator`` are the strategies accepted by
``Container.delegate`` and ``Container.configure``. ``ServiceLocator`` is the
abstract identifier ``Container.register_self`` aliases to the container.
"""

from typing import Any, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class ServiceLocator(Protocol):
    def get(self, key: Any) -> Any: ...

    def has(self, key: Any) -> bool: ...


@runtime_checkable
class ServiceFactory(Protocol):
    def create(self, container: ServiceLocator, args: Optional[Any] = None) -> Any: ...


@runtime_checkable
class ServiceConfigurator(Protocol):
    def configure(self, service: Any, config: Mapping[str, Any], container: ServiceLocator) -> Any: ...


def has_method(obj: Any, name: str) -> bool:
    """True when *obj* (an instance or a class) exposes a callable *name*."""
    return callable(getattr(obj, name, None))
