"""Hand-off to the system C compiler driver to assemble and link."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

from rcc.errors import ToolchainError

logger = logging.getLogger(__name__)


def find_cc(cc: str = "cc") -> str | None:
    """Absolute path of the C compiler driver, or None if not installed."""
    return shutil.which(cc)


def default_executable_path(asm_path: str) -> str:
    return os.path.splitext(asm_path)[0]


def assemble_and_link(asm_path: str, exe_path: str | None = None, cc: str = "cc") -> str:
    """Assemble and link ``asm_path`` into an executable. Returns its path."""
    exe_path = exe_path or default_executable_path(asm_path)
    cmd = [cc, asm_path, "-o", exe_path]
    logger.debug("running %s", " ".join(cmd))
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ToolchainError(f"C compiler '{cc}' not found") from e
    except subprocess.CalledProcessError as e:
        raise ToolchainError(f"{cc} failed with exit status {e.returncode}:\n{e.stderr.strip()}") from e
    return exe_path
