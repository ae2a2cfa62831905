"""Install orchestration: probe, decide, resolve, finalize.

A run is strictly linear with no retries. Any error aborts the remaining
steps and propagates to the caller.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional

from config import InstallerSettings
from constants import Constants
from common.http_client import download_file
from common.logging_utils import extra_context, is_debug_enabled
from platforms.descriptor import OsFamily, PlatformDescriptor, detect
from platforms.locator import ArchiveKind, ArtifactLocation, locate
from registry.nodejs.catalog import fetch_catalog
from versioning.matcher import best_match, is_version_matching
from versioning.parser import parse_constraint
from .archive import extract_tar, extract_zip
from .bin_scripts import create_bin_scripts, remove_bin_scripts
from .companions import CompanionInstaller
from .errors import FilesystemError, NoMatchingVersionError
from .host import HostProbe
from .locking import TargetLock
from .models import DecisionKind, HostState, InstallDecision, InstallOutcome

logger = logging.getLogger(__name__)


def decide(state: HostState, constraint: str, force_local: bool = False) -> InstallDecision:
    """Choose between the global install, an existing local one, or a new local one.

    Pure: the catalog is only consulted later, for ``INSTALL_LOCAL``.
    """
    spec = parse_constraint(constraint)

    if force_local:
        reason = "forcing local NodeJS install"
    elif state.global_version is None:
        reason = "no global NodeJS install found"
    elif not state.global_npm_path:
        reason = "no NPM install found"
    elif not is_version_matching(state.global_version, spec):
        reason = f"global NodeJS v{state.global_version} does not match constraint {constraint}"
    else:
        return InstallDecision(
            kind=DecisionKind.USE_EXISTING_GLOBAL,
            version=state.global_version,
            reason=f"global NodeJS install matches constraint {constraint}",
        )

    if state.local_version is not None and is_version_matching(state.local_version, spec):
        return InstallDecision(
            kind=DecisionKind.USE_EXISTING_LOCAL,
            version=state.local_version,
            reason=f"local NodeJS install matches constraint {constraint}",
        )
    return InstallDecision(kind=DecisionKind.INSTALL_LOCAL, reason=reason)


class InstallOrchestrator:
    """Coordinate one install (or uninstall) run for the given settings.

    Collaborators default to the real implementations; tests inject fakes.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        platform: Optional[PlatformDescriptor] = None,
        probe: Optional[HostProbe] = None,
        catalog: Optional[Callable[[], List[str]]] = None,
        download: Callable[[str, Path], Path] = download_file,
        extract: Callable[[Path, Path, int], int] = extract_tar,
        companions: Optional[CompanionInstaller] = None,
    ):
        self.settings = settings
        self.platform = platform or detect()
        self.windows = self.platform.os_family == OsFamily.WINDOWS
        self.probe = probe or HostProbe(settings.bin_dir, windows=self.windows)
        self.catalog = catalog or (lambda: fetch_catalog(settings.index_url))
        self.download = download
        self.extract = extract
        self.companions = companions or CompanionInstaller(
            self.probe,
            settings.vendor_dir,
            windows=self.windows,
            dist_url=settings.dist_url,
            download=download,
        )

    def probe_host(self) -> HostState:
        state = HostState(
            global_version=self.probe.global_version(),
            global_npm_path=self.probe.global_tool_path("npm"),
            local_version=self.probe.local_version(),
        )
        if state.global_version is not None:
            logger.debug(" - Global NodeJS install found: v%s", state.global_version)
        if state.local_version is not None:
            logger.debug(" - Local NodeJS install found: v%s", state.local_version)
        return state

    def resolve_version(self, constraint: str) -> str:
        """Pick the best catalog release for ``constraint``.

        Raises:
            NoMatchingVersionError: when nothing in the catalog matches.
        """
        version = best_match(constraint, self.catalog())
        if version is None:
            raise NoMatchingVersionError(constraint)
        return version

    def _ensure_dir(self, directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Unable to create directory {directory}") from exc
        if not os.access(directory, os.W_OK):
            raise FilesystemError(f"'{directory}' is not writable")

    def install(self, version: str) -> ArtifactLocation:
        """Download Node.js ``version`` and install it into the target directory."""
        logger.info("Installing NodeJS v%s", version)
        artifact = locate(version, self.platform, self.settings.dist_url)
        target_dir = self.settings.target_dir

        self._ensure_dir(self.settings.vendor_dir)
        archive = self.settings.vendor_dir / artifact.file_name
        self.download(artifact.url, archive)
        if not archive.exists():
            raise FilesystemError(
                f"{artifact.url} could not be saved to {archive}, make sure the directory is writable"
            )

        self._ensure_dir(target_dir)
        if artifact.archive_kind == ArchiveKind.TAR_GZ:
            self.extract(archive, target_dir, 1)
            archive.unlink()
        elif artifact.archive_kind == ArchiveKind.ZIP:
            extract_zip(archive, target_dir)
            archive.unlink()
        else:
            os.replace(archive, target_dir / artifact.file_name)
        return artifact

    def _global_lookup(self, name: str) -> Optional[str]:
        if name == "node":
            return self.probe.global_node_path()
        return self.probe.global_tool_path(name)

    def finalize(self, outcome: InstallOutcome) -> InstallOutcome:
        """Write entry points, then install the companion tools."""
        settings = self.settings
        scripts = create_bin_scripts(
            settings.bin_dir,
            settings.target_dir,
            outcome.decision.is_local,
            self._global_lookup,
            yarn_installed=bool(settings.yarn_version),
            windows=self.windows,
        )
        outcome.scripts = [str(s) for s in scripts]

        # Child processes (npm below) must see the wrappers first
        os.environ["PATH"] = str(settings.bin_dir) + os.pathsep + os.environ.get("PATH", "")

        outcome.npm_installed = self.companions.install_npm(settings.npm_version, settings.target_dir)
        outcome.yarn_installed = self.companions.install_yarn(settings.yarn_version, settings.yarn_dir)
        return outcome

    def run(self, constraint: Optional[str] = None) -> InstallOutcome:
        """Execute Probe → Decide → [Resolve] → Finalize under the target lock."""
        constraint = constraint or self.settings.constraint
        logger.info("NodeJS installer:")
        logger.info(" - Requested version: %s", constraint)

        with TargetLock(self.settings.vendor_dir, Constants.LOCK_FILE_NAME):
            state = self.probe_host()
            decision = decide(state, constraint, self.settings.force_local)
            logger.info(" - %s", decision.reason[:1].upper() + decision.reason[1:])

            if is_debug_enabled(logger):
                logger.debug(
                    "Install decision",
                    extra=extra_context(
                        event="decision",
                        component="orchestrator",
                        action="decide",
                        outcome=decision.kind.value,
                        version=decision.version,
                        constraint=constraint
                    )
                )

            outcome = InstallOutcome(decision=decision, constraint=constraint)
            if decision.kind == DecisionKind.INSTALL_LOCAL:
                version = self.resolve_version(constraint)
                outcome.decision = replace(decision, version=version)
                outcome.artifact = self.install(version)
            elif decision.kind == DecisionKind.USE_EXISTING_LOCAL:
                logger.info("NodeJS v%s already installed", decision.version)

            return self.finalize(outcome)

    def uninstall(self) -> List[Path]:
        """Remove the local install and every entry point; returns removed paths."""
        removed: List[Path] = []
        target_dir = self.settings.target_dir
        with TargetLock(self.settings.vendor_dir, Constants.LOCK_FILE_NAME):
            if target_dir.exists():
                logger.info("Removing NodeJS local install")
                shutil.rmtree(target_dir)
                removed.append(target_dir)

                parent = target_dir.parent
                if parent.is_dir() and not any(parent.iterdir()):
                    parent.rmdir()
                    removed.append(parent)

            logger.info("Removing NodeJS and NPM links from bin directory")
            removed.extend(remove_bin_scripts(self.settings.bin_dir))
        return removed
