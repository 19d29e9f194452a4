"""Sources of per-service configuration.

A source reads a document mapping service keys to their configuration and
turns every item into a :class:`ServiceEntry`. Two entry shapes are accepted::

    mailer:                       # setters: set_host("smtp"), set_port(25)
      host: smtp
      port: 25
    app.services.Cache:           # delegated to a configurator
      configurator: app.config.CacheConfigurator
      config: {size: 128}

Shape errors are raised here, before anything touches a container.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional

from .exceptions import ConfigurationError

CONFIGURATOR_FIELD = "configurator"
CONFIG_FIELD = "config"


@dataclass(frozen=True)
class ServiceEntry:
    """Configuration for one service.

    Attributes:
        key: Service key as written in the document.
        configurator: Dotted path of a configurator, or ``None`` for setters.
        config: Entries handed to the setters or to the configurator.
    """
    key: str
    configurator: Optional[str] = None
    config: Mapping[str, Any] = field(default_factory=dict)


def _entry(key: Any, node: Any, origin: str) -> ServiceEntry:
    if not isinstance(key, str):
        raise ConfigurationError(f"{origin}: service key {key!r} must be a string")
    if not isinstance(node, Mapping):
        raise ConfigurationError(f"{origin}: config for '{key}' must be a mapping, got {type(node).__name__}")
    if CONFIGURATOR_FIELD not in node:
        return ServiceEntry(key, None, dict(node))
    configurator = node[CONFIGURATOR_FIELD]
    config = node.get(CONFIG_FIELD, {})
    if not isinstance(configurator, str):
        raise ConfigurationError(f"{origin}: configurator for '{key}' must be a dotted path")
    if not isinstance(config, Mapping):
        raise ConfigurationError(f"{origin}: '{CONFIG_FIELD}' for '{key}' must be a mapping")
    unknown = set(node) - {CONFIGURATOR_FIELD, CONFIG_FIELD}
    if unknown:
        raise ConfigurationError(f"{origin}: unexpected fields for '{key}': {sorted(unknown)}")
    return ServiceEntry(key, configurator, dict(config))


class TreeSource:
    """Base class for configuration sources.

    Subclasses implement :meth:`get_tree`, returning the raw document;
    :meth:`entries` validates it.
    """

    def get_tree(self) -> Mapping[str, Any]:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__

    def entries(self) -> Iterator[ServiceEntry]:
        """Yield one validated :class:`ServiceEntry` per service.

        Raises:
            ConfigurationError: If the document is not a mapping of service
                key to entry, or an entry is malformed.
        """
        tree = self.get_tree()
        if not isinstance(tree, Mapping):
            raise ConfigurationError(f"{self.describe()}: top level must map service keys to config")
        for key, node in tree.items():
            yield _entry(key, node, self.describe())


class DictSource(TreeSource):
    """In-memory source, mostly for tests and programmatic setup.

    Example:
        >>> src = DictSource({"mailer": {"host": "smtp.local"}})
        >>> next(src.entries()).config
        {'host': 'smtp.local'}
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data = data

    def get_tree(self) -> Mapping[str, Any]:
        return self._data


class FileTreeSource(TreeSource):
    """Source parsed from a file; subclasses implement :meth:`parse`."""

    def __init__(self, path: str):
        self.path = path

    def describe(self) -> str:
        return f"{type(self).__name__}({self.path})"

    def parse(self, text: str) -> Any:
        raise NotImplementedError

    def read(self) -> str:
        try:
            with open(self.path, encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read service config {self.path}: {e}") from e

    def get_tree(self) -> Any:
        return self.parse(self.read())


class JsonTreeSource(FileTreeSource):
    def parse(self, text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as e:
            raise ConfigurationError(f"Invalid JSON in {self.path}: {e}") from e


class YamlTreeSource(FileTreeSource):
    """YAML file source; an empty document means no services.

    Needs the ``yaml`` extra (``pip install pico-registry[yaml]``).
    """

    def parse(self, text: str) -> Any:
        try:
            import yaml
        except ImportError:
            raise ConfigurationError(f"{self.describe()} requires PyYAML")
        try:
            return yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.path}: {e}") from e


def collect(source: TreeSource) -> Dict[str, ServiceEntry]:
    """Validate a whole source up front, keyed by service key."""
    return {entry.key: entry for entry in source.entries()}
