"""openclaw-profiles: model profile switching for the OpenClaw gateway.

This library manages named model profiles on top of a shared base config:
- Base config (config/base.json): skills, channels, hooks, auth, workspace
- Profile overlays (config/models/<name>.json): primary model, per-model
  settings and providers
- Active config (openclaw.json): base merged with the selected overlay

Manual edits made to the active config are detected and folded back into
the base config before every switch, with a timestamped backup of the
previous base. The active config is always replaced with an atomic rename.

Public API:
    ProfileManager: Main class for profile operations
    ProfilePaths: Dataclass locating every document below a root directory
    ProfileOverlay, ProfileSummary, Status: Read models
    SyncOutcome, SyncResult, SwitchResult, InitResult: Operation results
    extract_base, build_active_config: Pure document transforms
    ProfileError and subclasses: Exception types

Example:
    ```python
    from pathlib import Path
    from openclaw_profiles import ProfileManager, ProfilePaths

    # Application injects the root (policy)
    paths = ProfilePaths.from_root(Path.home() / ".openclaw")

    # Library provides mechanism
    manager = ProfileManager(paths)
    manager.init()

    result = manager.switch("opus-4.5")
    if result.gateway_running:
        print("Restart the gateway for the change to take effect")
    ```
"""

from .exceptions import BaseMissingError
from .exceptions import ConfigFileError
from .exceptions import DependencyMissingError
from .exceptions import GenerationFailedError
from .exceptions import ProfileError
from .exceptions import ProfileNotFoundError
from .manager import ProfileManager
from .manager import build_active_config
from .manager import extract_base
from .models import InitResult
from .models import ProfileOverlay
from .models import ProfilePaths
from .models import ProfileSummary
from .models import Status
from .models import SwitchResult
from .models import SyncOutcome
from .models import SyncResult

__version__ = "0.1.0"

__all__ = [
    "ProfileManager",
    "ProfilePaths",
    "ProfileOverlay",
    "ProfileSummary",
    "Status",
    "SyncOutcome",
    "SyncResult",
    "SwitchResult",
    "InitResult",
    "extract_base",
    "build_active_config",
    "ProfileError",
    "ProfileNotFoundError",
    "BaseMissingError",
    "GenerationFailedError",
    "DependencyMissingError",
    "ConfigFileError",
]
