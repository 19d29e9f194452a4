from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .analysis import import_key
from .exceptions import InvalidBindingError

KeyT = Union[str, type]


def _fmt(k: KeyT) -> str:
    return getattr(k, "__name__", str(k))


def _constructible(key: KeyT) -> bool:
    if isinstance(key, type):
        return True
    return isinstance(key, str) and import_key(key) is not None


class DependencyValidator:
    def __init__(self, services: Mapping[KeyT, Any], aliases: Mapping[KeyT, KeyT]):
        self._services = services
        self._aliases = aliases

    def _follow(self, start: KeyT) -> Tuple[List[KeyT], Optional[KeyT]]:
        """Walk the alias chain from *start*.

        Returns the visited chain and, if the chain loops, the repeated key.
        """
        chain: List[KeyT] = [start]
        key = start
        while key not in self._services and key in self._aliases:
            key = self._aliases[key]
            if key in chain:
                chain.append(key)
                return chain, key
            chain.append(key)
        return chain, None

    def validate_aliases(self) -> None:
        errors: List[str] = []
        reported_cycles: Dict[frozenset, bool] = {}

        for alias_key in self._aliases:
            if alias_key in self._services:
                continue
            chain, repeated = self._follow(alias_key)
            if repeated is not None:
                cycle = chain[chain.index(repeated):]
                marker = frozenset(cycle)
                if marker not in reported_cycles:
                    reported_cycles[marker] = True
                    errors.append("Alias cycle detected: " + " -> ".join(_fmt(k) for k in cycle))
                continue
            end = chain[-1]
            if end not in self._services and not _constructible(end):
                errors.append(f"Alias {_fmt(alias_key)} resolves to {_fmt(end)} which is not registered")

        if errors:
            raise InvalidBindingError(errors)
