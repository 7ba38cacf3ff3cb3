"""
Settings — the user-facing Quick Alias options and their persistence.

``PluginConfig`` is an immutable value.  ``SettingsManager`` owns the current
value, validates every change, persists it through the host's settings blob,
and hands the replacement value to whoever registered for updates (the
scheduler and the pipeline).  Nothing else mutates configuration.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable

from quick_alias.errors import ConfigError
from quick_alias.host import Host
from quick_alias.services.pattern_matcher import DEFAULT_FILE_PATTERN, compile_pattern

logger = logging.getLogger(__name__)

MIN_DEBOUNCE_MS = 1000
MAX_DEBOUNCE_MS = 5000
DEFAULT_DEBOUNCE_MS = 1000

# Keys written by earlier releases of the plugin
LEGACY_KEYS = {"fileRegex": "filePattern", "debounceTimeout": "debounceMs"}


@dataclass(frozen=True)
class PluginConfig:
    file_pattern: str = DEFAULT_FILE_PATTERN
    show_notice: bool = True
    debounce_ms: int = DEFAULT_DEBOUNCE_MS

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @classmethod
    def from_data(cls, data: dict[str, Any] | None) -> "PluginConfig":
        """Merge a stored blob over the defaults, clamping the debounce."""
        merged = {"filePattern": DEFAULT_FILE_PATTERN,
                  "showUpdateNotice": True,
                  "debounceMs": DEFAULT_DEBOUNCE_MS}
        for key, value in (data or {}).items():
            merged[LEGACY_KEYS.get(key, key)] = value

        return cls(
            file_pattern=str(merged["filePattern"] or DEFAULT_FILE_PATTERN),
            show_notice=_as_bool(merged["showUpdateNotice"], True),
            debounce_ms=clamp_debounce(merged["debounceMs"]),
        )

    def to_data(self) -> dict[str, Any]:
        return {
            "filePattern": self.file_pattern,
            "showUpdateNotice": self.show_notice,
            "debounceMs": self.debounce_ms,
        }


def _as_bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def clamp_debounce(value: Any) -> int:
    try:
        ms = int(value)
    except (TypeError, ValueError):
        return DEFAULT_DEBOUNCE_MS
    if ms <= 0:
        return DEFAULT_DEBOUNCE_MS
    return max(MIN_DEBOUNCE_MS, min(MAX_DEBOUNCE_MS, ms))


class SettingsManager:
    """Loads, validates, persists and broadcasts ``PluginConfig`` values."""

    def __init__(self, host: Host):
        self.host = host
        self.config = PluginConfig()
        self._listeners: list[Callable[[PluginConfig], None]] = []

    def subscribe(self, listener: Callable[[PluginConfig], None]) -> None:
        self._listeners.append(listener)

    # ── Persistence ───────────────────────────────────────────────────

    def load(self) -> PluginConfig:
        try:
            config = PluginConfig.from_data(self.host.load_config())
        except Exception:
            logger.exception("Error loading settings")
            self.host.notify("Failed to load Quick Alias settings. Using defaults.")
            config = PluginConfig()

        try:
            compile_pattern(config.file_pattern)
        except ConfigError as e:
            logger.error("Stored file pattern rejected: %s", e)
            self.host.notify(f"{e}. Using the default file pattern.")
            config = replace(config, file_pattern=DEFAULT_FILE_PATTERN)

        self._publish(config)
        return config

    def save(self) -> None:
        try:
            self.host.save_config(self.config.to_data())
        except Exception:
            logger.exception("Error saving settings")
            self.host.notify("Failed to save Quick Alias settings.")

    # ── Mutations ─────────────────────────────────────────────────────

    def set_file_pattern(self, value: str) -> PluginConfig:
        """Raises ``ConfigError`` (after notifying) and keeps the old pattern on bad input."""
        pattern = value or DEFAULT_FILE_PATTERN
        try:
            compile_pattern(pattern)
        except ConfigError as e:
            self.host.notify(str(e))
            raise
        return self._update(file_pattern=pattern)

    def set_show_notice(self, enabled: bool) -> PluginConfig:
        return self._update(show_notice=bool(enabled))

    def set_debounce(self, value: Any) -> PluginConfig:
        try:
            ms = int(value)
        except (TypeError, ValueError):
            ms = None
        if ms is None or not MIN_DEBOUNCE_MS <= ms <= MAX_DEBOUNCE_MS:
            message = (
                f"Debounce timeout must be a number between "
                f"{MIN_DEBOUNCE_MS} and {MAX_DEBOUNCE_MS}."
            )
            self.host.notify(message)
            raise ConfigError(message)
        return self._update(debounce_ms=ms)

    def _update(self, **changes: Any) -> PluginConfig:
        config = replace(self.config, **changes)
        self._publish(config)
        self.save()
        return config

    def _publish(self, config: PluginConfig) -> None:
        self.config = config
        for listener in self._listeners:
            listener(config)
