import importlib
import inspect
import typing
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Dict, List, Optional, Tuple, Union, get_args, get_origin

from .constants import SCALAR_TYPES

KeyT = Union[str, type]

_EMPTY = inspect.Parameter.empty


@dataclass(frozen=True)
class DependencyRequest:
    parameter_name: str
    position: int
    key: Optional[KeyT]
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    default: Any = _EMPTY
    is_optional: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not _EMPTY

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY


def import_key(name: str) -> Optional[type]:
    """Import the class named by ``"pkg.mod.Class"`` or ``"pkg.mod:Class"``.

    Returns ``None`` when the string does not name an importable class.
    """
    if ":" in name:
        module_name, _, attr = name.partition(":")
    else:
        module_name, _, attr = name.rpartition(".")
    if not module_name or not attr:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    obj = getattr(module, attr, None)
    return obj if isinstance(obj, type) else None


def _strip_annotated(ann: Any) -> Any:
    if get_origin(ann) is Annotated:
        args = get_args(ann)
        return args[0] if args else Any
    return ann


def _check_optional(ann: Any) -> Tuple[Any, bool]:
    if get_origin(ann) is Union:
        args = [a for a in get_args(ann) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return ann, False


def _key_for(ann: Any) -> Optional[KeyT]:
    if ann is _EMPTY or ann is Any:
        return None
    if isinstance(ann, str):
        return ann
    if isinstance(ann, type) and get_origin(ann) is None:
        if ann in SCALAR_TYPES:
            return None
        return ann
    return None


def _eval_annotation(ann: Any, globalns: Dict[str, Any]) -> Any:
    if not isinstance(ann, str):
        return ann
    try:
        return eval(ann, globalns)
    except Exception:
        return ann


def _type_hints(callable_obj: Callable[..., Any]) -> Dict[str, Any]:
    target = callable_obj.__init__ if isinstance(callable_obj, type) else callable_obj
    try:
        return typing.get_type_hints(target, include_extras=True)
    except Exception:
        pass
    # one unresolvable forward reference must not discard the others
    func = inspect.unwrap(getattr(target, "__func__", target))
    globalns = getattr(func, "__globals__", {})
    annotations = getattr(func, "__annotations__", None) or {}
    return {name: _eval_annotation(ann, globalns) for name, ann in annotations.items()}


def analyze_callable_dependencies(callable_obj: Callable[..., Any]) -> Tuple[DependencyRequest, ...]:
    """Describe the parameters of a class constructor or any callable.

    Raises:
        ValueError, TypeError: When ``inspect.signature`` cannot introspect
            the callable.
    """
    sig = inspect.signature(callable_obj)
    hints = _type_hints(callable_obj)

    plan: List[DependencyRequest] = []
    position = 0
    for name, param in sig.parameters.items():
        if name in ("self", "cls"):
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        ann = hints.get(name, param.annotation)
        ann = _strip_annotated(ann)
        base_type, is_optional = _check_optional(ann)
        base_type = _strip_annotated(base_type)

        plan.append(
            DependencyRequest(
                parameter_name=name,
                position=position,
                key=_key_for(base_type),
                kind=param.kind,
                default=param.default,
                is_optional=is_optional,
            )
        )
        position += 1

    return tuple(plan)
