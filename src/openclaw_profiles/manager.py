"""Profile manager: base/overlay merge, reconciliation and atomic commits."""

import contextlib
import copy
import json
import logging
import os
import shutil
import stat
import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from .defaults import DEFAULT_PROFILES
from .exceptions import BaseMissingError
from .exceptions import ConfigFileError
from .exceptions import GenerationFailedError
from .exceptions import ProfileNotFoundError
from .gateway import is_gateway_running
from .models import InitResult
from .models import ProfileOverlay
from .models import ProfilePaths
from .models import ProfileSummary
from .models import Status
from .models import SwitchResult
from .models import SyncOutcome
from .models import SyncResult
from .utils import delete_path
from .utils import get_path
from .utils import json_equal
from .utils import set_path
from .utils import utc_timestamp

logger = logging.getLogger(__name__)

# Model-specific locations inside a gateway config document
LAST_TOUCHED_PATH = ("meta", "lastTouchedAt")
PRIMARY_MODEL_PATH = ("agents", "defaults", "model", "primary")
MODEL_SETTINGS_PATH = ("agents", "defaults", "models")
PROVIDERS_PATH = ("models",)

BACKUP_STAMP_FORMAT = "%Y-%m-%d_%H%M%S"


def extract_base(document: dict[str, Any]) -> dict[str, Any]:
    """Project a config document onto its model-agnostic part.

    Clears the active model selection, the per-model settings and the
    last-touched stamp, and drops the provider block. The input is not
    modified and key order is preserved, so the result re-serializes like
    the source.

    Applying it twice gives the same result as applying it once.

    Args:
        document: Active config or base config

    Returns:
        New base-only document
    """
    base = copy.deepcopy(document)
    set_path(base, LAST_TOUCHED_PATH, None)
    set_path(base, PRIMARY_MODEL_PATH, None)
    set_path(base, MODEL_SETTINGS_PATH, {})
    delete_path(base, PROVIDERS_PATH)
    return base


def build_active_config(base: dict[str, Any], overlay: ProfileOverlay, timestamp: str | None = None) -> dict[str, Any]:
    """Merge a profile overlay over the base config.

    Providers are profile-exclusive: the provider block is present only when
    the overlay declares providers, and is otherwise removed even if the base
    carries one.

    Args:
        base: Base config (not modified)
        overlay: Profile overlay to apply
        timestamp: lastTouchedAt value (default: now, UTC)

    Returns:
        Candidate active config
    """
    candidate = copy.deepcopy(base)
    set_path(candidate, LAST_TOUCHED_PATH, timestamp or utc_timestamp())
    set_path(candidate, PRIMARY_MODEL_PATH, overlay.primary)
    set_path(candidate, MODEL_SETTINGS_PATH, copy.deepcopy(overlay.models))
    if overlay.providers:
        set_path(candidate, PROVIDERS_PATH, {"mode": "merge", "providers": copy.deepcopy(overlay.providers)})
    else:
        delete_path(candidate, PROVIDERS_PATH)
    return candidate


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


class ProfileManager:
    """Manages model profiles for an OpenClaw configuration root.

    The manager owns three documents (base config, profile overlays, active
    config) and the current-profile marker, all located through injected
    ProfilePaths. Every switch first folds manual edits of the active config
    back into the base config, then regenerates the active config from
    scratch and commits it with an atomic rename.

    Args:
        paths: Locations of all profile system documents
        gateway_probe: Callable reporting whether the gateway is listening
    """

    def __init__(self, paths: ProfilePaths, gateway_probe: Callable[[], bool] | None = None):
        self.paths = paths
        self.gateway_probe = gateway_probe or is_gateway_running

    # ===== Profile Store =====

    def list_profile_names(self) -> list[str]:
        """Names of all overlays in the profile store, sorted."""
        if not self.paths.models_dir.is_dir():
            return []
        return sorted(path.stem for path in self.paths.models_dir.glob("*.json") if path.is_file())

    def load_profile(self, name: str) -> ProfileOverlay:
        """Load a profile overlay by name.

        Raises:
            ProfileNotFoundError: If no overlay of that name exists
            ConfigFileError: If the overlay is not a valid overlay document
        """
        path = self.paths.overlay(name)
        if not _is_profile_name(name) or not path.is_file():
            raise ProfileNotFoundError(name, self.list_profile_names())

        return ProfileOverlay.from_dict(name, self._read_document(path))

    def list_profiles(self) -> list[ProfileSummary]:
        """Describe every profile, marking the current one.

        An overlay that cannot be loaded is listed as "Unknown" and logged;
        switching to it still fails.
        """
        current = self.get_current_profile()
        summaries = []
        for name in self.list_profile_names():
            try:
                overlay = self.load_profile(name)
            except ConfigFileError as e:
                logger.warning(f"Skipping details of invalid profile '{name}': {e}")
                overlay = ProfileOverlay(key=name)
            summaries.append(
                ProfileSummary(
                    name=name,
                    display_name=overlay.display_name,
                    description=overlay.description,
                    primary=overlay.primary,
                    is_current=name == current,
                )
            )
        return summaries

    # ===== Status =====

    def get_current_profile(self) -> str | None:
        """Name of the last successfully applied profile, or None."""
        marker = self.paths.current_marker
        if not marker.is_file():
            return None
        name = marker.read_text(encoding="utf-8").strip()
        return name or None

    def get_active_model(self) -> str | None:
        """Primary model embedded in the active config, or None."""
        if not self.paths.active.exists():
            return None
        return get_path(self._read_document(self.paths.active), PRIMARY_MODEL_PATH)

    def status(self) -> Status:
        """Report current profile, active model and gateway state."""
        return Status(
            current_profile=self.get_current_profile(),
            active_model=self.get_active_model(),
            active_config_exists=self.paths.active.exists(),
            gateway_running=self._probe_gateway(),
        )

    # ===== Reconciliation =====

    def sync(self) -> SyncResult:
        """Fold manual edits of the active config back into the base config.

        Returns:
            SyncResult describing what happened; ``backup`` is set when the
            previous base config was snapshotted before being replaced
        """
        if not self.paths.active.exists():
            return SyncResult(SyncOutcome.NO_ACTIVE_CONFIG)

        active_base = extract_base(self._read_document(self.paths.active))

        if not self.paths.base.exists():
            self._write_json(self.paths.base, active_base)
            logger.info(f"Created base config from {self.paths.active}")
            return SyncResult(SyncOutcome.BOOTSTRAPPED)

        stored_base = extract_base(self._read_document(self.paths.base))
        if json_equal(active_base, stored_base):
            return SyncResult(SyncOutcome.UNCHANGED)

        backup = self._backup_base()
        self._write_json(self.paths.base, active_base)
        logger.info(f"Updated base config with changes from {self.paths.active} (backup: {backup.name})")
        return SyncResult(SyncOutcome.UPDATED, backup=backup)

    # ===== Switching =====

    def switch(self, name: str) -> SwitchResult:
        """Apply a profile: sync, merge, validate, commit, record.

        The active config and the current-profile marker are left untouched
        on every failure path.

        Raises:
            ProfileNotFoundError: If the profile does not exist
            BaseMissingError: If there is still no base config after syncing
            GenerationFailedError: If the merged document is not valid JSON
            ConfigFileError: If a document cannot be read or written
        """
        overlay = self.load_profile(name)
        if overlay.primary is None:
            logger.warning(f"Profile '{name}' does not declare a primary model")

        sync_result = self.sync()

        if not self.paths.base.exists():
            raise BaseMissingError(self.paths.base)

        base = self._read_document(self.paths.base)
        candidate = build_active_config(base, overlay)
        self._write_json(self.paths.active, candidate)

        self.paths.current_marker.parent.mkdir(parents=True, exist_ok=True)
        self.paths.current_marker.write_text(f"{name}\n", encoding="utf-8")
        logger.info(f"Switched to profile '{name}' (primary: {overlay.primary})")

        return SwitchResult(profile=overlay, sync=sync_result, gateway_running=self._probe_gateway())

    # ===== Initialization =====

    def init(self) -> InitResult:
        """Bootstrap the profile system; safe to run repeatedly."""
        result = InitResult()
        self.paths.models_dir.mkdir(parents=True, exist_ok=True)

        if not self.paths.active.exists():
            result.active_config_missing = True
            logger.info(f"No active config at {self.paths.active}, skipping base config")
        elif self.paths.base.exists():
            result.base_existed = True
        else:
            self._write_json(self.paths.base, extract_base(self._read_document(self.paths.active)))
            result.base_created = True
            logger.info(f"Created base config from {self.paths.active}")

        if not self.list_profile_names():
            for name, overlay in DEFAULT_PROFILES.items():
                self._write_json(self.paths.overlay(name), overlay)
                result.installed_profiles.append(name)
            logger.info(f"Installed default profiles into {self.paths.models_dir}")

        return result

    # ===== Private Helpers =====

    def _probe_gateway(self) -> bool:
        """Ask the gateway probe, treating any failure as "not running"."""
        try:
            return bool(self.gateway_probe())
        except Exception as e:
            logger.debug(f"Gateway probe failed: {e}")
            return False

    def _backup_base(self) -> Path:
        """Copy the base config to a timestamped backup next to it.

        Raises:
            ConfigFileError: If the copy fails
        """
        backup = self._backup_path(datetime.now().strftime(BACKUP_STAMP_FORMAT))
        try:
            shutil.copy2(self.paths.base, backup)
        except OSError as e:
            raise ConfigFileError(f"Failed to back up {self.paths.base} to {backup}: {e}") from e
        logger.info(f"Backed up base config to {backup}")
        return backup

    def _backup_path(self, stamp: str) -> Path:
        """First unused backup path for a timestamp; existing backups are never overwritten."""
        base = self.paths.base
        candidate = base.with_name(f"{base.name}.{stamp}.bak")
        counter = 1
        while candidate.exists():
            candidate = base.with_name(f"{base.name}.{stamp}-{counter}.bak")
            counter += 1
        return candidate

    def _read_document(self, path: Path) -> dict[str, Any]:
        """Read a JSON document that must be an object.

        Raises:
            ConfigFileError: If the file cannot be read, is not strict JSON,
                or is not a JSON object
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f, parse_constant=_reject_constant)
        except (OSError, ValueError) as e:
            raise ConfigFileError(f"Failed to read configuration from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigFileError(f"Configuration in {path} must be a JSON object, got {type(data).__name__}")
        return data

    def _render_json(self, data: dict[str, Any], path: Path) -> str:
        """Serialize strictly and parse back.

        Raises:
            GenerationFailedError: If the document is not valid JSON
        """
        try:
            text = json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False) + "\n"
            json.loads(text)
        except (TypeError, ValueError) as e:
            raise GenerationFailedError(f"Generated config for {path} is invalid: {e}") from e
        return text

    def _write_json(self, path: Path, data: dict[str, Any]) -> None:
        """Validate then write a JSON document with an atomic rename.

        The temp file lives in the target's directory so the final
        os.replace never crosses filesystems.

        Raises:
            GenerationFailedError: If the document is not valid JSON
            ConfigFileError: If the write fails
        """
        text = self._render_json(data, path)

        path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            try:
                tmp_file.write(text)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            except OSError as e:
                tmp_file.close()
                with contextlib.suppress(OSError):
                    temp_path.unlink()
                raise ConfigFileError(f"Failed to write configuration to {path}: {e}") from e

        try:
            os.chmod(temp_path, _target_mode(path))
            os.replace(temp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                temp_path.unlink()
            raise ConfigFileError(f"Failed to write configuration to {path}: {e}") from e


def _target_mode(path: Path) -> int:
    """Permission bits a rewrite of path should keep.

    An existing file keeps its mode; a new one gets the umask default a plain
    open() would have produced, not the 0600 of a temp file.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _is_profile_name(name: str) -> bool:
    return bool(name) and not name.startswith(".") and "/" not in name and "\\" not in name
