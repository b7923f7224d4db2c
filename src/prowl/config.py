"""Prowl configuration.

ProwlConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from prowl._errors import ConfigError

_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


@dataclass(frozen=True, slots=True)
class ProwlConfig:
    """Configuration for a Prowl application.

    Attributes:
        root: Path to the project root directory (contains routes/).
              Always resolved to an absolute path on construction.
        routes_dir: Directory (relative to root) scanned for route modules.
        host: Bind address for dev/serve modes.
        port: Bind port for dev/serve modes.
        workers: Number of Pounce workers (0 = auto-detect).
        hot_reload: Watch routes_dir and swap handlers in place on change.
        extensions: File suffixes that qualify as route sources.
        exclude_prefix: Files whose name starts with this are private helpers.
        debounce_ms: Watcher debounce window in milliseconds.
        log_level: Level for the ``prowl`` logger hierarchy.

    """

    root: Path = field(default_factory=Path.cwd)
    routes_dir: str = "routes"
    host: str = "127.0.0.1"
    port: int = 3000
    workers: int = 0
    hot_reload: bool = False
    extensions: tuple[str, ...] = (".py",)
    exclude_prefix: str = "_"
    debounce_ms: int = 300
    log_level: str = "info"

    def __post_init__(self) -> None:
        # Resolve root to absolute so that watchfiles (which returns
        # absolute paths) can be compared via Path.relative_to().
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

        if not isinstance(self.extensions, tuple):
            object.__setattr__(self, "extensions", tuple(self.extensions))
        for ext in self.extensions:
            if not ext.startswith("."):
                msg = f"Route extension {ext!r} must start with '.'"
                raise ConfigError(msg)

        if self.log_level.lower() not in _LOG_LEVELS:
            msg = f"Unknown log_level {self.log_level!r}"
            raise ConfigError(msg)
        object.__setattr__(self, "log_level", self.log_level.lower())

        if not 0 < self.port < 65536:
            msg = f"port must be between 1 and 65535, got {self.port}"
            raise ConfigError(msg)

    @property
    def routes_path(self) -> Path:
        """Absolute path to the routes directory."""
        return self.root / self.routes_dir
