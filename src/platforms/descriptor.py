"""Host platform detection.

This is the only place that inspects the running interpreter's OS and CPU; the
rest of the resolution engine takes a ``PlatformDescriptor`` as input.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OsFamily(Enum):
    """Operating-system families the locator knows about."""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    SUNOS = "sunos"
    UNKNOWN = "unknown"


class ArmVariant(Enum):
    """ARM sub-variant, only reported on Linux."""
    NONE = "none"
    V6L = "v6l"
    V7L = "v7l"
    ARM64 = "arm64"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class PlatformDescriptor:
    os_family: OsFamily
    bits: int
    arm_variant: ArmVariant = ArmVariant.NONE
    system: str = ""
    machine: str = ""

    @property
    def is_arm(self) -> bool:
        return self.arm_variant != ArmVariant.NONE

    def describe(self) -> str:
        name = self.system or self.os_family.value
        return f"{name} - {self.bits} bits"


def _normalize_os(system: str) -> OsFamily:
    s = system.lower()
    if s.startswith("win") or s.startswith("cygwin") or s.startswith("msys"):
        return OsFamily.WINDOWS
    if s.startswith("darwin") or s.startswith("mac"):
        return OsFamily.MACOS
    if s.startswith("linux"):
        return OsFamily.LINUX
    if s.startswith("sunos") or s.startswith("solaris"):
        return OsFamily.SUNOS
    return OsFamily.UNKNOWN


def _arm_variant(machine: str) -> ArmVariant:
    m = machine.lower()
    if m in ("aarch64", "arm64"):
        return ArmVariant.ARM64
    if m.startswith("armv6"):
        return ArmVariant.V6L
    if m.startswith("armv7"):
        return ArmVariant.V7L
    if m.startswith("arm"):
        return ArmVariant.UNSUPPORTED
    return ArmVariant.NONE


def _interpreter_bits() -> int:
    return 64 if sys.maxsize > 2 ** 32 else 32


def detect(
    system: Optional[str] = None,
    machine: Optional[str] = None,
    bits: Optional[int] = None,
) -> PlatformDescriptor:
    """Describe the host: OS family, pointer width and ARM variant.

    Arguments default to the running interpreter's values. Unknown
    combinations are reported as-is; the locator decides what is supported.
    """
    system = platform.system() if system is None else system
    machine = platform.machine() if machine is None else machine
    bits = _interpreter_bits() if bits is None else bits

    family = _normalize_os(system)
    variant = _arm_variant(machine) if family == OsFamily.LINUX else ArmVariant.NONE
    return PlatformDescriptor(
        os_family=family,
        bits=bits,
        arm_variant=variant,
        system=system,
        machine=machine,
    )
