"""Constants used throughout pico-registry.

This module defines the framework logger and the markers understood by the
injector and by ``Container.configure``.
"""

import logging

LOGGER_NAME: str = "pico_registry"
"""Default logger name for pico-registry."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Logger instance for pico-registry internal diagnostics."""

PLACEHOLDER: str = "?"
"""Argument marker: resolve this position from the parameter's declared type."""

SETTER_PREFIX: str = "set_"
"""Prefix of the setter method ``configure`` deduces for each config entry."""

SCALAR_TYPES: tuple = (str, int, float, bool, bytes, complex)
"""Declared types the injector never resolves through the container."""
