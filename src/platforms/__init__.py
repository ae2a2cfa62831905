"""Host platform detection and artifact location."""

from .descriptor import ArmVariant, OsFamily, PlatformDescriptor, detect
from .locator import ArchiveKind, ArtifactLocation, locate

__all__ = [
    "ArmVariant",
    "OsFamily",
    "PlatformDescriptor",
    "detect",
    "ArchiveKind",
    "ArtifactLocation",
    "locate",
]
