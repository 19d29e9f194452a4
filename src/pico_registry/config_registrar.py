from typing import Any, Iterable, Mapping, Union

from .analysis import import_key
from .config_sources import DictSource, TreeSource, collect
from .constants import LOGGER

KeyT = Union[str, type]


def _resolve_key(name: str, known: Iterable[KeyT]) -> KeyT:
    if name in known:
        return name
    cls = import_key(name)
    return cls if cls is not None else name


class ConfigRegistrar:
    """Turns validated service entries into ``Container.configure`` calls.

    String keys registered as-is stay strings; otherwise an importable dotted
    path is replaced by its class. The whole source is validated before the
    first ``configure`` call.
    """

    def __init__(self, container: Any) -> None:
        self._container = container

    def apply(self, source: TreeSource) -> int:
        """Apply every entry of *source*; returns the number of services configured."""
        entries = collect(source)
        known = self._container.keys()
        for name, entry in entries.items():
            self._container.configure(_resolve_key(name, known), entry.configurator, entry.config)
        LOGGER.debug("Applied configuration for %d service(s) from %s", len(entries), source.describe())
        return len(entries)

    def apply_tree(self, tree: Mapping[str, Any]) -> int:
        return self.apply(DictSource(tree))
