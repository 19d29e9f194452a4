import inspect
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .analysis import DependencyRequest, analyze_callable_dependencies, import_key
from .constants import LOGGER, PLACEHOLDER
from .exceptions import RegistryError, ResolutionError, ServiceNotFoundError

KeyT = Union[str, type]
Resolver = Callable[[KeyT], Any]
ArgsT = Union[None, Sequence[Any], Mapping[Any, Any]]


def _fmt(k: Any) -> str:
    return getattr(k, "__name__", str(k))


def is_placeholder(value: Any) -> bool:
    return isinstance(value, str) and value == PLACEHOLDER


class TypeHintInjector:
    """Builds instances by resolving constructor parameters from their type hints.

    ``resolver`` is the callable used for every dependency lookup, normally the
    owning container's ``get``.

    Auto-wiring (``args is None``) resolves each parameter whose annotation
    names a class or a string identifier. A parameter that cannot be resolved
    falls back to its default value; a parameter with neither a usable
    annotation nor a default is an error.
    """

    def __init__(self, resolver: Resolver) -> None:
        self._resolve = resolver
        self._chain: List[Any] = []

    def target_class(self, key: Any) -> type:
        origin = self._chain[-1] if self._chain else None
        cls = import_key(key) if isinstance(key, str) else key
        if not isinstance(cls, type):
            raise ServiceNotFoundError(key, origin)
        if inspect.isabstract(cls) or getattr(cls, "_is_protocol", False):
            raise ServiceNotFoundError(key, origin)
        return cls

    def create(self, key: Any, args: ArgsT = None) -> Any:
        cls = self.target_class(key)
        if key in self._chain:
            path = " -> ".join(_fmt(k) for k in self._chain[self._chain.index(key):] + [key])
            raise ResolutionError(key, f"circular dependency: {path}")

        LOGGER.debug("Auto-constructing %s", _fmt(key))
        self._chain.append(key)
        try:
            return self._create(key, cls, args)
        finally:
            self._chain.pop()

    def _create(self, key: Any, cls: type, args: ArgsT) -> Any:
        if args is not None and len(args) == 0:
            return self._instantiate(key, cls, (), {})

        deps = self._analyze(key, cls)
        positional: List[Any] = []
        kwargs: Dict[str, Any] = {}

        if args is None:
            positional, kwargs = self._autowire(key, deps, skip=())
        elif isinstance(args, Mapping):
            if all(isinstance(k, int) for k in args):
                positional = self._merge_positions(key, deps, args)
            elif all(isinstance(k, str) for k in args):
                positional, kwargs = self._merge_keywords(key, deps, args)
            else:
                raise ResolutionError(key, "argument mapping mixes positions and names")
        else:
            positional = [self._placeholder_at(key, deps, i) if is_placeholder(a) else a for i, a in enumerate(args)]

        return self._instantiate(key, cls, positional, kwargs)

    def resolve_dependencies(self, callable_obj: Callable[..., Any], positions: Optional[Iterable[int]] = None) -> List[Any]:
        """Resolve the declared types of *callable_obj*'s parameters.

        Args:
            callable_obj: Function, bound method or class to introspect.
            positions: Parameter positions to resolve; all of them when ``None``.

        Returns:
            The resolved values, in the order of *positions*.
        """
        deps = self._analyze(callable_obj, callable_obj)
        wanted = range(len(deps)) if positions is None else positions
        return [self._placeholder_at(callable_obj, deps, i) for i in wanted]

    def _analyze(self, key: Any, target: Callable[..., Any]) -> Tuple[DependencyRequest, ...]:
        try:
            return analyze_callable_dependencies(target)
        except (ValueError, TypeError) as e:
            raise ResolutionError(key, f"cannot introspect signature: {e}") from e

    def _placeholder_at(self, key: Any, deps: Tuple[DependencyRequest, ...], position: int) -> Any:
        if position >= len(deps):
            raise ResolutionError(key, f"no parameter at position {position}")
        dep = deps[position]
        if dep.key is None:
            raise ResolutionError(key, f"parameter '{dep.parameter_name}' has no class-typed declaration")
        return self._resolve(dep.key)

    def _autowire_one(self, key: Any, dep: DependencyRequest) -> Tuple[bool, Any]:
        if dep.key is None:
            if dep.has_default:
                return False, dep.default
            if dep.is_optional:
                return True, None
            raise ResolutionError(key, f"parameter '{dep.parameter_name}' has no resolvable type and no default")
        try:
            return True, self._resolve(dep.key)
        except ServiceNotFoundError as e:
            # only a missing dependency falls back; failures inside it propagate
            if e.key != dep.key:
                raise
            if dep.has_default:
                return False, dep.default
            if dep.is_optional:
                return True, None
            raise

    def _autowire(self, key: Any, deps: Tuple[DependencyRequest, ...], skip: Iterable[str]) -> Tuple[List[Any], Dict[str, Any]]:
        skipped = set(skip)
        positional: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for dep in deps:
            if dep.parameter_name in skipped:
                continue
            found, value = self._autowire_one(key, dep)
            if dep.kind is inspect.Parameter.POSITIONAL_ONLY:
                positional.append(value)
            elif found:
                kwargs[dep.parameter_name] = value
        return positional, kwargs

    def _merge_positions(self, key: Any, deps: Tuple[DependencyRequest, ...], args: Mapping[int, Any]) -> List[Any]:
        if any(p < 0 for p in args):
            raise ResolutionError(key, "argument positions must not be negative")
        merged: List[Any] = []
        for pos in range(max(args) + 1):
            if pos in args and not is_placeholder(args[pos]):
                merged.append(args[pos])
            else:
                merged.append(self._placeholder_at(key, deps, pos))
        return merged

    def _merge_keywords(self, key: Any, deps: Tuple[DependencyRequest, ...], args: Mapping[str, Any]) -> Tuple[List[Any], Dict[str, Any]]:
        by_name = {d.parameter_name: d for d in deps}
        positional, kwargs = self._autowire(key, deps, skip=args.keys())
        for name, value in args.items():
            if is_placeholder(value):
                dep = by_name.get(name)
                if dep is None:
                    raise ResolutionError(key, f"no parameter named '{name}'")
                value = self._placeholder_at(key, deps, dep.position)
            kwargs[name] = value
        return positional, kwargs

    def _instantiate(self, key: Any, cls: type, positional: Sequence[Any], kwargs: Dict[str, Any]) -> Any:
        try:
            return cls(*positional, **kwargs)
        except RegistryError:
            raise
        except Exception as e:
            raise ResolutionError(key, f"{e.__class__.__name__}: {e}") from e
