"""Artifact location for Node.js, npm and Yarn distributions.

Maps a resolved version and a ``PlatformDescriptor`` to the download URL and
the way the downloaded file must be installed. Pure; never touches the host.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from constants import Constants
from installer.errors import UnsupportedPlatformError
from versioning.matcher import compare_versions
from versioning.parser import normalize_version
from .descriptor import ArmVariant, OsFamily, PlatformDescriptor


class ArchiveKind(Enum):
    """How a downloaded artifact is turned into an install."""
    TAR_GZ = "tar.gz"
    ZIP = "zip"
    RAW_EXECUTABLE = "raw"


@dataclass(frozen=True)
class ArtifactLocation:
    url: str
    archive_kind: ArchiveKind

    @property
    def file_name(self) -> str:
        return posixpath.basename(urlsplit(self.url).path)


def _arch(bits: int) -> str:
    return "x64" if bits == 64 else "x86"


def _tarball(base_url: str, version: str, target: str) -> ArtifactLocation:
    return ArtifactLocation(
        url=f"{base_url}/v{version}/node-v{version}-{target}.tar.gz",
        archive_kind=ArchiveKind.TAR_GZ,
    )


def _locate_windows(base_url: str, version: str, bits: int, modern: bool) -> ArtifactLocation:
    if modern:
        path = f"win-{_arch(bits)}/node.exe"
    else:
        path = "x64/node.exe" if bits == 64 else "node.exe"
    return ArtifactLocation(url=f"{base_url}/v{version}/{path}", archive_kind=ArchiveKind.RAW_EXECUTABLE)


def _locate_linux_arm(base_url: str, version: str, platform: PlatformDescriptor, modern: bool) -> ArtifactLocation:
    if not modern:
        raise UnsupportedPlatformError(
            "NodeJS-installer cannot install Node <4.0 on computers with ARM processors. "
            "Please install NodeJS globally on your machine first, then run the installer again, "
            "or consider installing a version of NodeJS >=4.0."
        )
    if platform.arm_variant == ArmVariant.V6L:
        return _tarball(base_url, version, "linux-armv6l")
    if platform.arm_variant == ArmVariant.V7L:
        return _tarball(base_url, version, "linux-armv7l")
    if platform.arm_variant == ArmVariant.ARM64 and platform.bits == 64:
        return _tarball(base_url, version, "linux-arm64")
    raise UnsupportedPlatformError(
        "NodeJS-installer cannot install Node on computers with ARM 32bits processors "
        f"that are not v6l or v7l ({platform.machine or platform.arm_variant.value}). "
        "Please install NodeJS globally on your machine first, then run the installer again."
    )


def locate(
    version: str,
    platform: PlatformDescriptor,
    base_url: str = Constants.NODEJS_DIST_URL,
) -> ArtifactLocation:
    """Return where to download Node.js ``version`` for ``platform``.

    Raises:
        UnsupportedPlatformError: when no distribution exists for the host.
    """
    version = normalize_version(version)
    base_url = base_url.rstrip("/")
    modern = compare_versions(version, Constants.ARCH_LAYOUT_MIN_VERSION) >= 0
    family = platform.os_family

    if platform.bits in (32, 64):
        if family == OsFamily.WINDOWS:
            return _locate_windows(base_url, version, platform.bits, modern)
        if family == OsFamily.MACOS:
            return _tarball(base_url, version, f"darwin-{_arch(platform.bits)}")
        if family == OsFamily.SUNOS:
            return _tarball(base_url, version, f"sunos-{_arch(platform.bits)}")
        if family == OsFamily.LINUX and platform.is_arm:
            return _locate_linux_arm(base_url, version, platform, modern)
        if family == OsFamily.LINUX:
            return _tarball(base_url, version, f"linux-{_arch(platform.bits)}")

    raise UnsupportedPlatformError(f"Unsupported architecture: {platform.describe()}")


def locate_npm_bootstrap(base_url: str = Constants.NODEJS_DIST_URL) -> ArtifactLocation:
    """Legacy npm zip used to seed a fresh Windows install before upgrading."""
    version = Constants.NPM_BOOTSTRAP_VERSION
    return ArtifactLocation(
        url=f"{base_url.rstrip('/')}/npm/npm-{version}.zip",
        archive_kind=ArchiveKind.ZIP,
    )


def locate_yarn(version: str, base_url: str = Constants.YARN_RELEASES_URL) -> ArtifactLocation:
    version = normalize_version(version)
    return ArtifactLocation(
        url=f"{base_url.rstrip('/')}/v{version}/yarn-v{version}.tar.gz",
        archive_kind=ArchiveKind.TAR_GZ,
    )
