import os
import sys
from pathlib import Path

APP_DIR_NAME = "NWN2 Reference Tables"
HOME_ENV_VAR = "NWN2_REFERENCE_HOME"


def is_frozen() -> bool:
    return getattr(sys, "frozen", False) or "__compiled__" in globals()


def get_app_data_dir() -> Path:
    """Per-user application folder under LOCALAPPDATA/APPDATA, or the home directory"""
    app_data = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or os.path.expanduser("~")
    return Path(app_data) / APP_DIR_NAME


def get_base_dir() -> Path:
    override = os.getenv(HOME_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    if is_frozen():
        return get_app_data_dir()
    # Backend root (parent of 'utils')
    return Path(__file__).parent.parent


def get_writable_dir(sub_dir: str = "logs") -> Path:
    """
    Get a writable directory for logs or exports, creating it when missing.

    Falls back to the per-user application folder when the base directory
    cannot be written to.
    """
    target_dir = get_base_dir() / sub_dir

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        # Test write access
        probe = target_dir / ".write_test"
        probe.touch()
        probe.unlink()
        return target_dir
    except OSError:
        fallback = get_app_data_dir() / sub_dir
        if fallback == target_dir:
            raise
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback
