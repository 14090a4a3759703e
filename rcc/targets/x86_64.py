"""x86-64 backend, GNU assembler AT&T syntax (System V / Mach-O)."""

from __future__ import annotations

from rcc.targets.base import AssemblyGenerator

IMM32_MIN = -(2**31)
IMM32_MAX = 2**31 - 1


class X86_64Generator(AssemblyGenerator):
    """Integer results are returned in %rax; the frame is the classic rbp chain."""

    name = "x86_64"
    comment = "#"

    def emit_function_header(self, sym: str) -> None:
        self.directive(f"globl {sym}")
        self.directive("p2align 4, 0x90")
        if self.platform == "linux":
            self.directive(f"type {sym}, @function")

    def emit_prologue(self) -> None:
        self.instr("pushq %rbp")
        self.instr("movq %rsp, %rbp")

    def emit_epilogue(self) -> None:
        self.instr("popq %rbp")
        self.instr("ret")

    def emit_load_int(self, value: int) -> None:
        if IMM32_MIN <= value <= IMM32_MAX:
            self.instr(f"movq ${value}, %rax")
        else:
            # movq only takes a sign-extended 32-bit immediate
            self.instr(f"movabsq ${value}, %rax")

    def emit_load_zero(self) -> None:
        self.instr("xorl %eax, %eax")
