"""npm and Yarn installation on top of a Node.js install."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from constants import Constants
from common.http_client import download_file
from platforms.locator import locate_npm_bootstrap, locate_yarn
from .archive import extract_tar, extract_zip
from .errors import CompanionToolError, FilesystemError
from .host import HostProbe

logger = logging.getLogger(__name__)

Runner = Callable[[List[str]], int]


def _run(cmd: List[str]) -> int:
    executable = shutil.which(cmd[0]) or cmd[0]
    logger.debug("Running %s", " ".join(cmd))
    try:
        return subprocess.run([executable] + cmd[1:], check=False).returncode
    except OSError as exc:
        logger.debug("Unable to run %s: %s", cmd[0], exc)
        return 127


class CompanionInstaller:
    """Install or upgrade npm and Yarn next to the Node.js install.

    Collaborators default to the real network/process helpers and are
    injectable for tests.
    """

    def __init__(
        self,
        probe: HostProbe,
        vendor_dir: Path,
        windows: bool = False,
        dist_url: str = Constants.NODEJS_DIST_URL,
        download: Callable[[str, Path], Path] = download_file,
        run: Runner = _run,
    ):
        self.probe = probe
        self.vendor_dir = Path(vendor_dir)
        self.windows = windows
        self.dist_url = dist_url
        self.download = download
        self.run = run

    def _bootstrap_windows_npm(self, target_dir: Path) -> None:
        """Seed a fresh Windows install with the legacy npm zip; upgraded right after."""
        artifact = locate_npm_bootstrap(self.dist_url)
        archive = self.vendor_dir / artifact.file_name
        self.download(artifact.url, archive)
        extract_zip(archive, target_dir)
        archive.unlink()

    def install_npm(self, constraint: Optional[str], target_dir: Path) -> bool:
        """Install npm matching ``constraint`` globally through the exposed npm.

        Returns:
            True when npm was (re)installed.

        Raises:
            CompanionToolError: when ``npm install`` fails.
        """
        local_version = self.probe.local_npm_version()
        initial_windows_install = self.windows and not local_version

        if initial_windows_install:
            self._bootstrap_windows_npm(Path(target_dir))

        if not constraint and not initial_windows_install:
            return False

        package = "npm"
        if constraint:
            logger.info("Installing NPM %s", constraint)
            package = f"npm@{constraint}"

        returncode = self.run(["npm", "-g", "install", package])
        if not local_version or local_version != self.probe.local_npm_version():
            # clean cache if the npm version changed
            self.run(["npm", "cache", "clean", "--force"])
        if returncode != 0:
            raise CompanionToolError("An error occurred while updating NPM to latest version.")
        return True

    def install_yarn(self, version: Optional[str], yarn_dir: Path) -> bool:
        """Install Yarn ``version`` into ``yarn_dir``.

        Returns:
            True when the requested Yarn is present afterwards.
        """
        if not version:
            return False

        yarn_dir = Path(yarn_dir)
        local_version = self.probe.local_yarn_version(yarn_dir)
        if local_version == version:
            logger.info("Yarn v%s already installed", version)
            return True

        if self.windows:
            logger.warning("Cannot install yarn on windows yet")
            return False

        logger.info("Installing Yarn v%s", version)
        artifact = locate_yarn(version)
        archive = self.vendor_dir / artifact.file_name
        self.download(artifact.url, archive)

        shutil.rmtree(yarn_dir, ignore_errors=True)
        try:
            yarn_dir.mkdir(parents=True)
        except OSError as exc:
            raise FilesystemError(f"Unable to create directory {yarn_dir}") from exc

        extract_tar(archive, yarn_dir, strip_components=1)
        archive.unlink()
        return True
