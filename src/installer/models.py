"""Data models for install decisions and outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from platforms.locator import ArtifactLocation


class DecisionKind(Enum):
    """Where the runtime exposed to the project comes from."""
    USE_EXISTING_GLOBAL = "use_existing_global"
    USE_EXISTING_LOCAL = "use_existing_local"
    INSTALL_LOCAL = "install_local"


@dataclass(frozen=True)
class HostState:
    """Snapshot of existing installs taken at the start of a run."""
    global_version: Optional[str]
    global_npm_path: Optional[str]
    local_version: Optional[str]


@dataclass(frozen=True)
class InstallDecision:
    """Decision for one run.

    ``version`` is the existing version for the ``USE_EXISTING_*`` kinds and
    the resolved release for ``INSTALL_LOCAL`` (None until resolved).
    """
    kind: DecisionKind
    version: Optional[str] = None
    reason: str = ""

    @property
    def is_local(self) -> bool:
        return self.kind != DecisionKind.USE_EXISTING_GLOBAL


@dataclass
class InstallOutcome:
    """What a completed run did."""
    decision: InstallDecision
    constraint: str
    artifact: Optional[ArtifactLocation] = None
    scripts: List[str] = field(default_factory=list)
    npm_installed: bool = False
    yarn_installed: bool = False
