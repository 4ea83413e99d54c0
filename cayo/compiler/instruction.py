from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .opcodes import Opcode, BinaryOperator


@dataclass(frozen=True)
class LoadConstant:
    """Push the constant at `index` in the chunk's pool."""
    index: int

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"LoadConstant index must be >= 0, got {self.index}")

    @property
    def opcode(self) -> Opcode:
        return Opcode.LOAD_CONST


@dataclass(frozen=True)
class Negate:
    """Pop a number, push its negation."""

    @property
    def opcode(self) -> Opcode:
        return Opcode.NEGATE


@dataclass(frozen=True)
class BinaryOp:
    """Pop right then left, push `left op right`."""
    op: BinaryOperator

    @property
    def opcode(self) -> Opcode:
        return self.op.opcode


@dataclass(frozen=True)
class Return:
    """Pop the result and halt."""

    @property
    def opcode(self) -> Opcode:
        return Opcode.RETURN


Instruction = Union[LoadConstant, Negate, BinaryOp, Return]


def simple_instruction(op: Opcode) -> Instruction:
    """Build the operand-less instruction for `op`."""
    if op == Opcode.NEGATE:
        return Negate()
    if op == Opcode.RETURN:
        return Return()
    return BinaryOp(BinaryOperator.from_opcode(op))
