"""Tests for mapping a version and platform to a download artifact."""

import pytest

from installer.errors import UnsupportedPlatformError
from platforms.descriptor import ArmVariant, OsFamily, PlatformDescriptor
from platforms.locator import ArchiveKind, locate, locate_npm_bootstrap, locate_yarn

DIST = "https://nodejs.org/dist"


def platform_of(family, bits, arm=ArmVariant.NONE):
    return PlatformDescriptor(os_family=family, bits=bits, arm_variant=arm)


class TestLinux:
    """Linux tarballs."""

    def test_x64(self):
        loc = locate("6.0.0", platform_of(OsFamily.LINUX, 64))
        assert loc.url == f"{DIST}/v6.0.0/node-v6.0.0-linux-x64.tar.gz"
        assert loc.url.endswith("linux-x64.tar.gz")
        assert loc.archive_kind == ArchiveKind.TAR_GZ
        assert loc.file_name == "node-v6.0.0-linux-x64.tar.gz"

    def test_x86(self):
        loc = locate("0.12.7", platform_of(OsFamily.LINUX, 32))
        assert loc.url == f"{DIST}/v0.12.7/node-v0.12.7-linux-x86.tar.gz"

    def test_leading_v_is_stripped(self):
        assert locate("v6.0.0", platform_of(OsFamily.LINUX, 64)).url == f"{DIST}/v6.0.0/node-v6.0.0-linux-x64.tar.gz"

    def test_custom_base_url(self):
        loc = locate("6.0.0", platform_of(OsFamily.LINUX, 64), base_url="https://mirror.example/node/")
        assert loc.url == "https://mirror.example/node/v6.0.0/node-v6.0.0-linux-x64.tar.gz"


class TestLinuxArm:
    """ARM tarballs and their failures."""

    def test_armv6l(self):
        loc = locate("6.0.0", platform_of(OsFamily.LINUX, 32, ArmVariant.V6L))
        assert loc.url.endswith("node-v6.0.0-linux-armv6l.tar.gz")

    def test_armv7l(self):
        loc = locate("8.9.4", platform_of(OsFamily.LINUX, 32, ArmVariant.V7L))
        assert loc.url == f"{DIST}/v8.9.4/node-v8.9.4-linux-armv7l.tar.gz"

    def test_arm64(self):
        loc = locate("16.0.0", platform_of(OsFamily.LINUX, 64, ArmVariant.ARM64))
        assert loc.url.endswith("node-v16.0.0-linux-arm64.tar.gz")

    def test_threshold_version_is_supported(self):
        loc = locate("4.0.0", platform_of(OsFamily.LINUX, 32, ArmVariant.V6L))
        assert loc.url.endswith("linux-armv6l.tar.gz")

    def test_pre_4_arm_fails(self):
        with pytest.raises(UnsupportedPlatformError, match="<4.0"):
            locate("3.9.9", platform_of(OsFamily.LINUX, 32, ArmVariant.V6L))

    def test_unsupported_arm32_fails(self):
        with pytest.raises(UnsupportedPlatformError, match="ARM 32bits"):
            locate("6.0.0", platform_of(OsFamily.LINUX, 32, ArmVariant.UNSUPPORTED))

    def test_arm64_variant_with_32_bit_userland_fails(self):
        with pytest.raises(UnsupportedPlatformError):
            locate("6.0.0", platform_of(OsFamily.LINUX, 32, ArmVariant.ARM64))


class TestWindows:
    """Raw node.exe downloads."""

    def test_32_bit_legacy_layout(self):
        loc = locate("3.3.0", platform_of(OsFamily.WINDOWS, 32))
        assert loc.url == f"{DIST}/v3.3.0/node.exe"
        assert "win-x86" not in loc.url
        assert loc.archive_kind == ArchiveKind.RAW_EXECUTABLE

    def test_32_bit_modern_layout(self):
        loc = locate("5.0.0", platform_of(OsFamily.WINDOWS, 32))
        assert loc.url == f"{DIST}/v5.0.0/win-x86/node.exe"

    def test_64_bit_legacy_layout(self):
        assert locate("0.12.7", platform_of(OsFamily.WINDOWS, 64)).url == f"{DIST}/v0.12.7/x64/node.exe"

    def test_64_bit_modern_layout(self):
        loc = locate("4.10.0", platform_of(OsFamily.WINDOWS, 64))
        assert loc.url == f"{DIST}/v4.10.0/win-x64/node.exe"
        assert loc.file_name == "node.exe"


class TestOtherPlatforms:
    """macOS, SunOS and unsupported hosts."""

    @pytest.mark.parametrize("bits,arch", [(64, "x64"), (32, "x86")])
    def test_macos(self, bits, arch):
        loc = locate("10.0.0", platform_of(OsFamily.MACOS, bits))
        assert loc.url == f"{DIST}/v10.0.0/node-v10.0.0-darwin-{arch}.tar.gz"
        assert loc.archive_kind == ArchiveKind.TAR_GZ

    @pytest.mark.parametrize("bits,arch", [(64, "x64"), (32, "x86")])
    def test_sunos(self, bits, arch):
        loc = locate("10.0.0", platform_of(OsFamily.SUNOS, bits))
        assert loc.url == f"{DIST}/v10.0.0/node-v10.0.0-sunos-{arch}.tar.gz"

    def test_unknown_os_fails(self):
        desc = PlatformDescriptor(OsFamily.UNKNOWN, 64, system="FreeBSD", machine="amd64")
        with pytest.raises(UnsupportedPlatformError, match="Unsupported architecture: FreeBSD - 64 bits"):
            locate("10.0.0", desc)

    def test_unknown_bit_width_fails(self):
        with pytest.raises(UnsupportedPlatformError):
            locate("10.0.0", platform_of(OsFamily.LINUX, 16))


class TestCompanionArtifacts:
    """npm bootstrap zip and Yarn tarballs."""

    def test_npm_bootstrap(self):
        loc = locate_npm_bootstrap()
        assert loc.url == f"{DIST}/npm/npm-1.4.12.zip"
        assert loc.archive_kind == ArchiveKind.ZIP
        assert loc.file_name == "npm-1.4.12.zip"

    def test_yarn(self):
        loc = locate_yarn("v1.22.19")
        assert loc.url == "https://github.com/yarnpkg/yarn/releases/download/v1.22.19/yarn-v1.22.19.tar.gz"
        assert loc.archive_kind == ArchiveKind.TAR_GZ
