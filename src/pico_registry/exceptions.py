"""Exception hierarchy for pico-registry.

All registry-specific exceptions inherit from :class:`RegistryError`, making it
easy to catch any container error with a single ``except RegistryError`` clause.
"""

from typing import Any, Optional


def _key_name(key: Any) -> str:
    return getattr(key, "__name__", str(key))


class RegistryError(Exception):
    """Base exception for all pico-registry errors."""

    pass


class ServiceNotFoundError(RegistryError):
    """Raised when ``get()`` finds no recipe, no alias and no way to build the key.

    Attributes:
        key: The identifier that was not found.
        origin: The service whose construction requested the key, if any.
    """

    def __init__(self, key: Any, origin: Optional[Any] = None):
        origin_name = _key_name(origin) if origin is not None else "get"
        super().__init__(f"Service '{_key_name(key)}' not found (required by: '{origin_name}')")
        self.key = key
        self.origin = origin


class ResolutionError(RegistryError):
    """Raised when auto-construction cannot build a service.

    Attributes:
        key: The identifier being constructed.
        reason: Human-readable description of the failure.
    """

    def __init__(self, key: Any, reason: str):
        super().__init__(f"Cannot resolve '{_key_name(key)}': {reason}")
        self.key = key
        self.reason = reason


class AlreadyFinalizedError(RegistryError):
    """Raised when a shared service is modified after its first resolution.

    Attributes:
        key: The finalized identifier.
    """

    def __init__(self, key: Any):
        super().__init__(f"Cannot override initialized service '{_key_name(key)}'")
        self.key = key


class NotRegisteredError(RegistryError):
    """Raised when ``extend()`` or ``configure()`` targets a key with no recipe."""

    def __init__(self, key: Any):
        super().__init__(f"Service '{_key_name(key)}' has not been registered")
        self.key = key


class InvalidRegistrationError(RegistryError):
    """Raised when a factory or configurator lacks its required method."""

    def __init__(self, msg: str):
        super().__init__(msg)


class ConfigurationError(RegistryError):
    """Raised for configuration problems (unreadable sources, malformed entries)."""

    def __init__(self, msg: str):
        super().__init__(msg)


class InvalidBindingError(RegistryError):
    """Raised when validation finds broken aliases.

    Attributes:
        errors: List of human-readable error descriptions.
    """

    def __init__(self, errors: list[str]):
        super().__init__("Invalid bindings:\n" + "\n".join(f"- {e}" for e in errors))
        self.errors = errors
