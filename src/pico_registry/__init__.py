# pico_registry/__init__.py
from .container import Container
from .injector import TypeHintInjector
from .factory import Producer, Value
from .protocols import ServiceConfigurator, ServiceFactory, ServiceLocator
from .constants import PLACEHOLDER
from .config_sources import DictSource, JsonTreeSource, YamlTreeSource
from .config_registrar import ConfigRegistrar
from .api import init
from .exceptions import (
    RegistryError,
    ServiceNotFoundError,
    ResolutionError,
    AlreadyFinalizedError,
    NotRegisteredError,
    InvalidRegistrationError,
    ConfigurationError,
    InvalidBindingError,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "Container",
    "TypeHintInjector",
    "Producer",
    "Value",
    "ServiceConfigurator",
    "ServiceFactory",
    "ServiceLocator",
    "PLACEHOLDER",
    "DictSource",
    "JsonTreeSource",
    "YamlTreeSource",
    "ConfigRegistrar",
    "init",
    "RegistryError",
    "ServiceNotFoundError",
    "ResolutionError",
    "AlreadyFinalizedError",
    "NotRegisteredError",
    "InvalidRegistrationError",
    "ConfigurationError",
    "InvalidBindingError",
]
