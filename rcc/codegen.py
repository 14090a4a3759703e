"""Code generation entry point and backend registry."""

from __future__ import annotations

import logging
import platform as _platform
import sys
from typing import Optional

from rcc.ast_nodes import Program
from rcc.targets import AArch64Generator, Backend, X86_64Generator

logger = logging.getLogger(__name__)

TARGETS = ("x86_64", "aarch64", "llvm")

_MACHINE_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


def host_target() -> str:
    """Native backend matching the running machine; falls back to llvm."""
    return _MACHINE_ALIASES.get(_platform.machine().lower(), "llvm")


def host_platform() -> str:
    return "macos" if sys.platform == "darwin" else "linux"


def get_backend(target: str, platform: str = "linux") -> Backend:
    if target == "x86_64":
        return X86_64Generator(platform)
    if target == "aarch64":
        return AArch64Generator(platform)
    if target == "llvm":
        from rcc.targets.llvm import LLVMGenerator
        return LLVMGenerator(platform)
    raise ValueError(f"unknown target '{target}' (expected one of {', '.join(TARGETS)})")


def generate(program: Program, target: Optional[str] = None, platform: Optional[str] = None) -> str:
    """Generate assembly text for a parsed program."""
    target = target or host_target()
    platform = platform or host_platform()
    logger.debug("generating %s assembly for %s", target, platform)
    return get_backend(target, platform).generate(program)
