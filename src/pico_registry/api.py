from typing import Any, Callable, Dict, Iterable, Optional, Union

from .config_registrar import ConfigRegistrar
from .config_sources import TreeSource
from .container import Container

KeyT = Union[str, type]


def init(
    *,
    shared: Iterable[Any] = (),
    factories: Iterable[Any] = (),
    aliases: Optional[Dict[KeyT, Any]] = None,
    sources: Iterable[TreeSource] = (),
    register_self: bool = True,
    injector_factory: Optional[Callable[[Callable[[Any], Any]], Any]] = None,
    validate: bool = False,
) -> Container:
    """Build a new container.

    Registration order is: the container itself, shared services, factory
    services, aliases, then configuration from *sources*. Nothing is built
    until the first ``get``.

    Args:
        shared: Identifiers or instances registered with ``share``.
        factories: Identifiers or instances registered with ``factory``.
        aliases: ``{alias: target}`` pairs.
        sources: Configuration trees applied through ``configure``.
        register_self: Register the container under its own type and
            ``ServiceLocator``.
        injector_factory: Alternative injector, called with ``container.get``.
        validate: Run ``Container.validate`` before returning.

    Returns:
        The new container. No module-level instance is kept.
    """
    container = Container(injector_factory=injector_factory)
    if register_self:
        container.register_self()
    for item in shared:
        container.share(item)
    for item in factories:
        container.factory(item)
    for alias_key, target in (aliases or {}).items():
        container.alias(alias_key, target)

    registrar = ConfigRegistrar(container)
    for source in sources:
        registrar.apply(source)

    if validate:
        container.validate()
    return container
