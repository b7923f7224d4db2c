"""Prowl error hierarchy.

All prowl-specific errors inherit from ProwlError for easy catching.
"""

from pathlib import Path


class ProwlError(Exception):
    """Base error for all prowl operations."""


class ConfigError(ProwlError):
    """Invalid or missing configuration."""


class RouteError(ProwlError):
    """A route source file could not be turned into a route.

    Attributes:
        path: The route source file that failed.

    """

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class MissingHandlerError(RouteError):
    """The route module exports no callable ``handler``."""


class RouteLoadError(RouteError):
    """Reading, compiling, or executing the route module raised."""


class RegistrationError(ProwlError):
    """Routes were bound into the host more than once."""
