from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from cayo.errors import UnknownConstantIndex
from cayo.types.constant import Constant, Number

from .instruction import Instruction, LoadConstant, Negate, BinaryOp, Return
from .opcodes import BinaryOperator


@dataclass
class Chunk:
    """One compilation unit: instructions, a constant pool and a line table.

    `code` and `lines` always have the same length; `write` is the only way
    to grow them. Entries are never removed or rewritten.
    """

    code: List[Instruction] = field(default_factory=list)
    constants: List[Constant] = field(default_factory=list)
    lines: List[int] = field(default_factory=list)

    def write(self, instruction: Instruction, line: int) -> int:
        """Append one instruction and its source line. Returns its index."""
        self.code.append(instruction)
        self.lines.append(line)
        return len(self.code) - 1

    def add_constant(self, value: Constant | float) -> int:
        """Append to the pool and return the new index. Indices are never reused."""
        if not isinstance(value, Constant):
            value = Number(value)
        self.constants.append(value)
        return len(self.constants) - 1

    def get_constant(self, index: int) -> Constant:
        if not 0 <= index < len(self.constants):
            raise UnknownConstantIndex(
                f"Constant index {index} outside pool of {len(self.constants)}"
            )
        return self.constants[index]

    def get_line(self, pc: int) -> int:
        if not 0 <= pc < len(self.lines):
            raise IndexError(f"No line recorded for instruction {pc}")
        return self.lines[pc]

    # --- Emit helpers ---
    def emit_constant(self, value: Constant | float, line: int) -> int:
        idx = self.add_constant(value)
        return self.write(LoadConstant(idx), line)

    def emit_negate(self, line: int) -> int:
        return self.write(Negate(), line)

    def emit_binary(self, op: BinaryOperator, line: int) -> int:
        return self.write(BinaryOp(op), line)

    def emit_return(self, line: int) -> int:
        return self.write(Return(), line)

    # --- Encoding ---
    def to_bytes(self) -> bytes:
        from .encoding import encode_chunk
        return encode_chunk(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> Chunk:
        from .encoding import decode_chunk
        return decode_chunk(data)

    def __len__(self) -> int:
        return len(self.code)

    def __repr__(self) -> str:
        return f"<Chunk of {len(self.code)} instructions, {len(self.constants)} constants>"
