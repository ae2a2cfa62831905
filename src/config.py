"""Installer settings: defaults, YAML/JSON config file and CLI overrides.

The config file carries a ``nodejs`` section::

    nodejs:
      version: ">=18.0.0 <21.0.0"     # string or list of fragments
      targetDir: vendor/nodejs/nodejs
      binDir: vendor/bin
      vendorDir: vendor
      forceLocal: false
      npmVersion: "^10.0.0"
      yarnVersion: "1.22.19"
      distUrl: https://nodejs.org/dist

Relative directories are resolved against the config file's directory, or the
working directory when no file is given. CLI values win over the file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants
from installer.errors import FilesystemError
from versioning.matcher import merge_constraints

logger = logging.getLogger(__name__)


@dataclass
class InstallerSettings:
    """Resolved configuration for one installer run."""
    target_dir: Path
    bin_dir: Path
    vendor_dir: Path
    force_local: bool = False
    versions: List[str] = field(default_factory=list)
    npm_version: Optional[str] = None
    yarn_version: Optional[str] = None
    dist_url: str = Constants.NODEJS_DIST_URL
    index_url: str = Constants.NODEJS_INDEX_URL

    @property
    def constraint(self) -> str:
        return merge_constraints(self.versions)

    @property
    def yarn_dir(self) -> Path:
        return self.target_dir / Constants.YARN_SUBDIR


def _load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the ``nodejs`` section from a YAML/JSON config file.

    Raises:
        FilesystemError: when the file is missing or unreadable.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        raise FilesystemError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise FilesystemError(f"Failed to load config {config_path}: {e}") from e

    if not isinstance(data, dict):
        return {}
    section = data.get(Constants.CONFIG_SECTION, data)
    return section if isinstance(section, dict) else {}


def _as_fragments(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _resolve_dir(value: Any, base_dir: Path) -> Path:
    path = Path(str(value).rstrip("/\\"))
    if not path.is_absolute():
        path = base_dir / path
    return path


def load_settings(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> InstallerSettings:
    """Build settings from defaults, the config file, then ``overrides``.

    ``overrides`` uses the config keys; None values are ignored. Its
    ``version`` fragments are appended after the file's.
    """
    file_settings = _load_config_file(config_path)
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    base_dir = Path(config_path).resolve().parent if config_path else Path.cwd()

    def pick(key: str, default: Any = None) -> Any:
        if key in overrides:
            return overrides[key]
        return file_settings.get(key, default)

    vendor_dir = _resolve_dir(pick("vendorDir", Constants.DEFAULT_VENDOR_DIR), base_dir)
    bin_dir = _resolve_dir(pick("binDir", Constants.DEFAULT_BIN_DIR), base_dir)
    target_value = pick("targetDir")
    if target_value:
        target_dir = _resolve_dir(target_value, base_dir)
    else:
        target_dir = vendor_dir / Constants.DEFAULT_TARGET_SUBDIR

    versions = _as_fragments(file_settings.get("version")) + _as_fragments(overrides.get("version"))

    settings = InstallerSettings(
        target_dir=target_dir,
        bin_dir=bin_dir,
        vendor_dir=vendor_dir,
        force_local=_as_bool(pick("forceLocal", False)),
        versions=versions,
        npm_version=_opt_str(pick("npmVersion")),
        yarn_version=_opt_str(pick("yarnVersion")),
        dist_url=str(pick("distUrl", Constants.NODEJS_DIST_URL)),
        index_url=str(pick("indexUrl", Constants.NODEJS_INDEX_URL)),
    )
    logger.debug("Loaded settings: %s", settings)
    return settings
