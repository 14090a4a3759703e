"""Code generation backends."""

from .base import Backend, AssemblyGenerator, PLATFORMS
from .x86_64 import X86_64Generator
from .aarch64 import AArch64Generator
