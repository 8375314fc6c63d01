"""Platform detection.

Native libraries are bundled per platform in a folder named after the
platform prefix, ``<os>-<arch>`` (``linux-x86-64``, ``win32-x86-64``,
``darwin-aarch64``, ...).
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from typing import Optional

_OS_NAMES = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "win32",
    "cygwin": "win32",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
    "dragonfly": "dragonflybsd",
    "sunos": "sunos",
    "aix": "aix",
}

_ARCH_NAMES = {
    "x86_64": "x86-64",
    "amd64": "x86-64",
    "x64": "x86-64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "x86": "x86",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm": "arm",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "ppc": "ppc",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loongarch64",
    "sparc64": "sparcv9",
    "mips64": "mips64",
}


@dataclass(frozen=True)
class PlatformInfo:
    """Normalized operating system and CPU architecture."""

    os: str
    arch: str

    @property
    def resource_prefix(self) -> str:
        """Folder name holding this platform's bundled libraries."""
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "win32"

    @property
    def is_darwin(self) -> bool:
        return self.os == "darwin"


def normalize_os(name: str) -> str:
    name = name.lower()
    for prefix, normalized in _OS_NAMES.items():
        if name.startswith(prefix):
            return normalized
    if name.startswith("windows"):
        return "win32"
    return name


def normalize_arch(machine: str) -> str:
    machine = machine.lower()
    return _ARCH_NAMES.get(machine, machine)


def get_platform_info(
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> PlatformInfo:
    """Detect the current platform.

    Args:
        system: Override for ``sys.platform`` (mainly for tests).
        machine: Override for ``platform.machine()``.

    Returns:
        PlatformInfo with normalized names.
    """
    os_name = normalize_os(system if system is not None else sys.platform)
    arch = normalize_arch(machine if machine is not None else platform.machine())

    # 32-bit interpreters on 64-bit Windows report the host machine
    if os_name == "win32" and machine is None and arch == "x86-64" and sys.maxsize <= 2**32:
        arch = "x86"

    return PlatformInfo(os=os_name, arch=arch)
