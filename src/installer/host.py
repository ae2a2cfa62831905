"""Queries against the host: existing global and local installs."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from versioning.parser import normalize_version

logger = logging.getLogger(__name__)


class HostProbe:
    """Detect Node.js, npm and Yarn installs visible from ``bin_dir`` or ``PATH``.

    Args:
        bin_dir: Directory holding the generated entry-point scripts.
        windows: Whether entry points carry a ``.bat`` extension.
    """

    def __init__(self, bin_dir: Path, windows: bool = False):
        self.bin_dir = Path(bin_dir)
        self.windows = windows

    def _script(self, name: str) -> Path:
        return self.bin_dir / (f"{name}.bat" if self.windows else name)

    def _run_version(self, cmd: List[str]) -> Optional[str]:
        """Run ``cmd`` and return the last line of its output, or None on failure."""
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as exc:
            logger.debug("Unable to run %s: %s", cmd[0], exc)
            return None
        if result.returncode != 0:
            return None
        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        return lines[-1] if lines else None

    def global_version(self) -> Optional[str]:
        """Version of the Node.js found on ``PATH`` (``nodejs`` first, then ``node``)."""
        for command in ("nodejs", "node"):
            version = self._run_version([command, "-v"])
            if version:
                return normalize_version(version)
        return None

    def global_tool_path(self, command: str) -> Optional[str]:
        return shutil.which(command)

    def global_node_path(self) -> Optional[str]:
        return self.global_tool_path("nodejs") or self.global_tool_path("node")

    def local_version(self) -> Optional[str]:
        script = self._script("node")
        if not script.exists():
            return None
        version = self._run_version([str(script), "-v"])
        return normalize_version(version) if version else None

    def local_npm_version(self) -> Optional[str]:
        script = self._script("npm")
        if not script.exists():
            return None
        return self._run_version([str(script), "-v"])

    def local_yarn_version(self, yarn_dir: Path) -> Optional[str]:
        script = self._script("yarnpkg")
        if not script.exists() or not (Path(yarn_dir) / "bin" / "yarn").exists():
            return None
        return self._run_version([str(script), "--version"])
