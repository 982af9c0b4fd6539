"""Data models for openclaw-profiles."""

import os
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from pathlib import Path
from typing import Any

from .exceptions import ConfigFileError

DEFAULT_ROOT = Path("~/.openclaw")


class SyncOutcome(Enum):
    """What a sync run did to the base config."""

    NO_ACTIVE_CONFIG = "no-active-config"
    BOOTSTRAPPED = "bootstrapped"
    UNCHANGED = "unchanged"
    UPDATED = "updated"


@dataclass(frozen=True)
class ProfilePaths:
    """Locations of every document the profile system touches.

    Applications inject these paths; the manager never hardcodes a location.

    Attributes:
        root: Gateway configuration root (typically ~/.openclaw)
        active: Active config consumed by the gateway
        config_dir: Directory holding the base config and its backups
        base: Shared, model-agnostic base config
        models_dir: Profile store, one <name>.json overlay per profile
        current_marker: Plain-text file naming the last applied profile
    """

    root: Path
    active: Path
    config_dir: Path
    base: Path
    models_dir: Path
    current_marker: Path

    @classmethod
    def from_root(cls, root: Path) -> "ProfilePaths":
        """Derive the standard layout below a root directory."""
        config_dir = root / "config"
        return cls(
            root=root,
            active=root / "openclaw.json",
            config_dir=config_dir,
            base=config_dir / "base.json",
            models_dir=config_dir / "models",
            current_marker=config_dir / ".current-model",
        )

    @classmethod
    def from_env(cls) -> "ProfilePaths":
        """Layout rooted at $OPENCLAW_DIR, falling back to ~/.openclaw."""
        root = os.environ.get("OPENCLAW_DIR") or str(DEFAULT_ROOT)
        return cls.from_root(Path(root).expanduser())

    def overlay(self, name: str) -> Path:
        """Path of the overlay document for a profile name."""
        return self.models_dir / f"{name}.json"


@dataclass(frozen=True)
class ProfileOverlay:
    """Model-specific fragment merged over the base config.

    Only ``primary`` is expected in the document; everything else defaults
    to empty.
    """

    key: str
    name: str = ""
    description: str = ""
    primary: str | None = None
    models: dict[str, Any] = field(default_factory=dict)
    providers: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any]) -> "ProfileOverlay":
        """Build an overlay from its JSON document.

        Raises:
            ConfigFileError: If a field has the wrong JSON type
        """
        for text_field in ("name", "description", "primary"):
            value = data.get(text_field)
            if value is not None and not isinstance(value, str):
                raise ConfigFileError(f"Profile '{key}': '{text_field}' must be a string, got {type(value).__name__}")
        for object_field in ("models", "providers"):
            value = data.get(object_field)
            if value is not None and not isinstance(value, dict):
                raise ConfigFileError(f"Profile '{key}': '{object_field}' must be an object, got {type(value).__name__}")

        return cls(
            key=key,
            name=data.get("name") or "",
            description=data.get("description") or "",
            primary=data.get("primary"),
            models=data.get("models") or {},
            providers=data.get("providers") or {},
        )

    @property
    def display_name(self) -> str:
        return self.name or "Unknown"


@dataclass(frozen=True)
class ProfileSummary:
    """One profile store entry as shown by listings."""

    name: str
    display_name: str
    description: str
    primary: str | None
    is_current: bool


@dataclass(frozen=True)
class SyncResult:
    outcome: SyncOutcome
    backup: Path | None = None

    @property
    def changed(self) -> bool:
        return self.outcome is SyncOutcome.UPDATED


@dataclass(frozen=True)
class SwitchResult:
    profile: ProfileOverlay
    sync: SyncResult
    gateway_running: bool


@dataclass(frozen=True)
class Status:
    """Snapshot of what is configured right now.

    ``current_profile`` comes from the marker file and ``active_model`` from
    the active config itself; they disagree when the active config was edited
    by hand and not yet synced.
    """

    current_profile: str | None
    active_model: str | None
    active_config_exists: bool
    gateway_running: bool


@dataclass
class InitResult:
    base_created: bool = False
    base_existed: bool = False
    active_config_missing: bool = False
    installed_profiles: list[str] = field(default_factory=list)
