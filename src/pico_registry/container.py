# src/pico_registry/container.py
import copy
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Union

from .constants import LOGGER, SETTER_PREFIX
from .exceptions import (
    AlreadyFinalizedError,
    InvalidRegistrationError,
    NotRegisteredError,
    ResolutionError,
    ServiceNotFoundError,
)
from .factory import Producer, Recipe, Value
from .injector import ArgsT, TypeHintInjector, is_placeholder
from .protocols import ServiceLocator, has_method

KeyT = Union[str, type]
Decorator = Callable[[Any, "Container"], Any]


def _fmt(k: Any) -> str:
    return getattr(k, "__name__", str(k))


def is_identifier(obj: Any) -> bool:
    return isinstance(obj, (str, type))


def key_of(id_or_instance: Any) -> KeyT:
    """Normalize an identifier or an instance to an identifier."""
    return id_or_instance if is_identifier(id_or_instance) else type(id_or_instance)


class Container:
    """Flat service registry with lazy construction and finalize-on-first-use.

    Keys are classes or strings. A shared key is built once, cached, and from
    then on write-protected; a factory key is rebuilt on every ``get``.

    Example:
        >>> c = Container()
        >>> c.share(Logger).alias("log", Logger)
        >>> c.get("log") is c.get(Logger)
        True
    """

    def __init__(self, injector_factory: Optional[Callable[[Callable[[Any], Any]], Any]] = None) -> None:
        self._services: Dict[KeyT, Recipe] = {}
        self._factories: Set[KeyT] = set()
        self._initialized: Dict[KeyT, Any] = {}
        self._aliases: Dict[KeyT, KeyT] = {}
        self._injector = (injector_factory or TypeHintInjector)(self.get)

    @property
    def injector(self) -> Any:
        return self._injector

    def get(self, key: KeyT) -> Any:
        try:
            registered = key in self._services
        except TypeError:
            raise ServiceNotFoundError(key) from None
        if not registered:
            if key in self._aliases:
                target = self._aliases[key]
                LOGGER.debug("Following alias %s -> %s", _fmt(key), _fmt(target))
                return self.get(target)
            return self._injector.create(key)

        if key in self._initialized:
            return self._initialized[key]

        recipe = self._services[key]
        if isinstance(recipe, Value):
            if key not in self._factories:
                self._initialized[key] = recipe.value
            return recipe.value

        value = recipe.produce(self)
        if key in self._factories:
            return value

        self._services[key] = Value(value)
        self._initialized[key] = value
        LOGGER.debug("Finalized shared service %s", _fmt(key))
        return value

    def has(self, key: KeyT) -> bool:
        try:
            hash(key)
        except TypeError:
            return False
        seen: Set[Any] = set()
        while key not in self._services:
            if key in seen or key not in self._aliases:
                return False
            seen.add(key)
            key = self._aliases[key]
        return True

    def keys(self) -> List[KeyT]:
        return list(self._services)

    def aliases(self) -> Dict[KeyT, KeyT]:
        return dict(self._aliases)

    def is_finalized(self, key: KeyT) -> bool:
        return key in self._initialized

    def is_factory(self, key: KeyT) -> bool:
        return key in self._factories

    def _guard(self, key: KeyT) -> None:
        if key in self._initialized:
            raise AlreadyFinalizedError(key)

    def _store(self, key: KeyT, recipe: Recipe, shared: bool) -> "Container":
        self._guard(key)
        self._services[key] = recipe
        if shared:
            self._factories.discard(key)
        else:
            self._factories.add(key)
        LOGGER.debug("Registered %s (%s, %s)", _fmt(key), "shared" if shared else "factory", recipe.description)
        return self

    def bind(self, key: KeyT, producer: Callable[["Container"], Any], shared: bool = True) -> "Container":
        """Register *producer* (called with the container) under *key*."""
        return self._store(key, Producer(producer, description=f"bind {_fmt(key)}"), shared)

    def instance(self, key: KeyT, value: Any) -> "Container":
        """Register an already-built shared *value* under *key*."""
        return self._store(key, Value(value), shared=True)

    def set(self, id_or_value: Any, args: ArgsT = None, shared: bool = True) -> "Container":
        """Register a class to auto-construct, or a concrete instance.

        Args:
            id_or_value: A class or string identifier, or an instance (keyed
                by its type).
            args: Constructor arguments for identifiers. ``None`` auto-wires
                every parameter, ``[]`` constructs with no arguments, a
                sequence or ``{position: value}`` mapping may contain ``"?"``
                placeholders, a ``{name: value}`` mapping passes keywords.
            shared: Cache the first built value (``True``) or rebuild on every
                ``get`` (``False``). Non-shared instances are copied.

        Raises:
            AlreadyFinalizedError: If the key has already been resolved.
        """
        if is_identifier(id_or_value):
            key = id_or_value
            self._guard(key)
            recipe: Recipe = Producer(lambda c, k=key, a=args: c._injector.create(k, a), description=f"construct {_fmt(key)}")
        else:
            key = type(id_or_value)
            self._guard(key)
            if shared:
                recipe = Value(id_or_value)
            else:
                recipe = Producer(lambda c, v=id_or_value: copy.copy(v), description=f"copy {_fmt(key)}")
        return self._store(key, recipe, shared)

    def share(self, id_or_value: Any, args: ArgsT = None) -> "Container":
        return self.set(id_or_value, args, shared=True)

    def factory(self, id_or_value: Any, args: ArgsT = None) -> "Container":
        return self.set(id_or_value, args, shared=False)

    def alias(self, alias_key: KeyT, target: Any) -> "Container":
        target_key = key_of(target)
        self._aliases[alias_key] = target_key
        LOGGER.debug("Aliased %s -> %s", _fmt(alias_key), _fmt(target_key))
        return self

    def delegate(self, key: KeyT, factory: Any, args: Optional[Any] = None, shared: bool = True) -> "Container":
        """Register *key* as built by ``factory.create(container, args)``.

        *factory* is a factory instance, or an identifier resolved through
        ``get`` when the service is first built.

        Raises:
            InvalidRegistrationError: If *factory* has no ``create`` method.
            AlreadyFinalizedError: If the key has already been resolved.
        """
        self._guard(key)
        if not isinstance(factory, str) and not has_method(factory, "create"):
            raise InvalidRegistrationError(f"Factory '{_fmt(key_of(factory))}' for '{_fmt(key)}' must define create()")

        def build(c: "Container") -> Any:
            obj = c.get(factory) if is_identifier(factory) else factory
            if not has_method(obj, "create"):
                raise InvalidRegistrationError(f"Factory '{_fmt(key_of(factory))}' for '{_fmt(key)}' must define create()")
            return obj.create(c, args)

        return self._store(key, Producer(build, description=f"delegate {_fmt(key)}"), shared)

    def extend(self, key: KeyT, decorator: Decorator) -> "Container":
        """Wrap the recipe of *key*; *decorator* receives ``(value, container)``.

        Raises:
            NotRegisteredError: If *key* has no recipe.
            AlreadyFinalizedError: If *key* has already been resolved.
        """
        if key not in self._services:
            raise NotRegisteredError(key)
        self._guard(key)
        inner = self._services[key]

        def extended(c: "Container") -> Any:
            return decorator(inner.produce(c), c)

        return self._store(key, Producer(extended, description=f"extend {_fmt(key)}"), key not in self._factories)

    def configure(self, key: KeyT, configurator: Any = None, config: Optional[Mapping[str, Any]] = None) -> "Container":
        """Apply *config* to the service built for *key*.

        Without a configurator every ``name: value`` entry calls
        ``service.set_<name>(value)``; a ``"?"`` value is resolved from the
        setter's parameter type. A configurator (instance or identifier) gets
        ``configure(service, config, container)`` and returns the service.

        Raises:
            NotRegisteredError: If *key* has no recipe.
            AlreadyFinalizedError: If *key* has already been resolved.
            InvalidRegistrationError: If the configurator has no ``configure``.
        """
        entries = dict(config or {})
        if key not in self._services:
            raise NotRegisteredError(key)
        self._guard(key)
        if configurator is not None and not isinstance(configurator, str) and not has_method(configurator, "configure"):
            raise InvalidRegistrationError(f"Configurator '{_fmt(key_of(configurator))}' for '{_fmt(key)}' must define configure()")

        def apply(service: Any, c: "Container") -> Any:
            if configurator is None:
                return self._apply_setters(key, service, entries)
            obj = c.get(configurator) if is_identifier(configurator) else configurator
            if not has_method(obj, "configure"):
                raise InvalidRegistrationError(f"Configurator '{_fmt(key_of(configurator))}' for '{_fmt(key)}' must define configure()")
            return obj.configure(service, entries, c)

        return self.extend(key, apply)

    def _apply_setters(self, key: KeyT, service: Any, entries: Mapping[str, Any]) -> Any:
        for name, value in entries.items():
            setter = getattr(service, SETTER_PREFIX + name, None)
            if not callable(setter):
                raise ResolutionError(key, f"service has no setter '{SETTER_PREFIX}{name}'")
            if is_placeholder(value):
                value = self._injector.resolve_dependencies(setter, [0])[0]
            setter(value)
        return service

    def register_self(self) -> "Container":
        self.instance(type(self), self)
        self.alias(ServiceLocator, type(self))
        return self

    def validate(self) -> None:
        from .dependency_validator import DependencyValidator

        DependencyValidator(self._services, self._aliases).validate_aliases()

    def __contains__(self, key: KeyT) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return f"<Container services={len(self._services)} aliases={len(self._aliases)} finalized={len(self._initialized)}>"
