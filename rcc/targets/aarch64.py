"""AArch64 backend (AAPCS64), GNU and Apple assembler syntax."""

from __future__ import annotations

from rcc.targets.base import AssemblyGenerator

MASK64 = 2**64 - 1


class AArch64Generator(AssemblyGenerator):
    """Integer results are returned in x0; x29/x30 are saved as a frame record."""

    name = "aarch64"
    comment = "//"

    def emit_function_header(self, sym: str) -> None:
        self.directive(f"globl {sym}")
        self.directive("p2align 2")
        if self.platform == "linux":
            self.directive(f"type {sym}, %function")

    def emit_prologue(self) -> None:
        self.instr("stp x29, x30, [sp, #-16]!")
        self.instr("mov x29, sp")

    def emit_epilogue(self) -> None:
        self.instr("ldp x29, x30, [sp], #16")
        self.instr("ret")

    def emit_load_int(self, value: int) -> None:
        bits = value & MASK64
        if bits <= 0xFFFF:
            self.instr(f"mov x0, #{bits}")
            return
        # Wide immediates are assembled 16 bits at a time.
        first = True
        for shift in (0, 16, 32, 48):
            part = (bits >> shift) & 0xFFFF
            if part == 0:
                continue
            op = "movz" if first else "movk"
            self.instr(f"{op} x0, #{part}, lsl #{shift}")
            first = False
