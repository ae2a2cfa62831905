"""Tests for host platform detection."""

import dataclasses

import pytest

from platforms.descriptor import ArmVariant, OsFamily, PlatformDescriptor, detect


class TestDetect:
    """OS family, bit width and ARM variant reporting."""

    def test_linux_x64(self):
        desc = detect("Linux", "x86_64", 64)
        assert desc.os_family == OsFamily.LINUX
        assert desc.bits == 64
        assert desc.arm_variant == ArmVariant.NONE
        assert not desc.is_arm

    @pytest.mark.parametrize(
        "machine,bits,variant",
        [
            ("armv6l", 32, ArmVariant.V6L),
            ("armv7l", 32, ArmVariant.V7L),
            ("aarch64", 64, ArmVariant.ARM64),
            ("arm64", 64, ArmVariant.ARM64),
            ("armv5tel", 32, ArmVariant.UNSUPPORTED),
        ],
    )
    def test_linux_arm_variants(self, machine, bits, variant):
        desc = detect("Linux", machine, bits)
        assert desc.arm_variant == variant
        assert desc.is_arm

    def test_arm_variant_only_reported_on_linux(self):
        desc = detect("Darwin", "arm64", 64)
        assert desc.os_family == OsFamily.MACOS
        assert desc.arm_variant == ArmVariant.NONE

    @pytest.mark.parametrize(
        "system,family",
        [
            ("Windows", OsFamily.WINDOWS),
            ("CYGWIN_NT-10.0", OsFamily.WINDOWS),
            ("Darwin", OsFamily.MACOS),
            ("SunOS", OsFamily.SUNOS),
            ("FreeBSD", OsFamily.UNKNOWN),
        ],
    )
    def test_os_families(self, system, family):
        assert detect(system, "x86_64", 64).os_family == family

    def test_raw_host_strings_kept(self):
        desc = detect("FreeBSD", "amd64", 64)
        assert desc.system == "FreeBSD"
        assert desc.machine == "amd64"
        assert desc.describe() == "FreeBSD - 64 bits"

    def test_defaults_to_running_host(self):
        desc = detect()
        assert desc.bits in (32, 64)
        assert isinstance(desc.os_family, OsFamily)

    def test_descriptor_is_immutable(self):
        desc = PlatformDescriptor(OsFamily.LINUX, 64)
        with pytest.raises(dataclasses.FrozenInstanceError):
            desc.bits = 32
