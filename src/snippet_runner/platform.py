# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host platform conventions for dynamic libraries and executables."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class PlatformConventions:
    """Naming rules the host loader and toolchain follow.

    Attributes:
        library_path_var: Environment variable the dynamic loader searches.
        sysroot_lib_subdir: Sub-directory of the toolchain sysroot holding
            the runtime shared libraries, or ``None`` when the compiler's
            ``target-libdir`` holds them.
        dylib_prefix: Filename prefix of a shared library.
        dylib_suffix: Filename suffix of a shared library.
        exe_suffix: Suffix appended to compiled executables.
    """

    library_path_var: str
    sysroot_lib_subdir: str | None
    dylib_prefix: str
    dylib_suffix: str
    exe_suffix: str

    def dylib_filename(self, name: str) -> str:
        """Return the shared-library filename for crate ``name``."""

        return f"{self.dylib_prefix}{name}{self.dylib_suffix}"


LINUX: Final[PlatformConventions] = PlatformConventions(
    library_path_var="LD_LIBRARY_PATH",
    sysroot_lib_subdir=None,
    dylib_prefix="lib",
    dylib_suffix=".so",
    exe_suffix="",
)
MACOS: Final[PlatformConventions] = PlatformConventions(
    library_path_var="DYLD_LIBRARY_PATH",
    sysroot_lib_subdir=None,
    dylib_prefix="lib",
    dylib_suffix=".dylib",
    exe_suffix="",
)
WINDOWS: Final[PlatformConventions] = PlatformConventions(
    library_path_var="PATH",
    sysroot_lib_subdir="bin",
    dylib_prefix="",
    dylib_suffix=".dll",
    exe_suffix=".exe",
)


def current_platform(platform: str | None = None) -> PlatformConventions:
    """Return the conventions for ``platform`` (defaults to :data:`sys.platform`)."""

    name = sys.platform if platform is None else platform
    if name.startswith("win"):
        return WINDOWS
    if name == "darwin":
        return MACOS
    return LINUX


__all__ = ["LINUX", "MACOS", "WINDOWS", "PlatformConventions", "current_platform"]
