from __future__ import annotations

from enum import Enum, IntEnum


class Opcode(IntEnum):
    # Constants
    LOAD_CONST = 0x01  # u16 index
    # Unary
    NEGATE = 0x02

    # Arithmetic
    ADD = 0x10
    SUB = 0x11
    MUL = 0x12
    DIV = 0x13

    # Halt
    RETURN = 0x20


class BinaryOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def opcode(self) -> Opcode:
        return _OPERATOR_OPCODES[self]

    @classmethod
    def from_opcode(cls, op: Opcode) -> BinaryOperator:
        for operator, opcode in _OPERATOR_OPCODES.items():
            if opcode == op:
                return operator
        raise ValueError(f"{op!r} is not a binary operator opcode")


_OPERATOR_OPCODES = {
    BinaryOperator.ADD: Opcode.ADD,
    BinaryOperator.SUBTRACT: Opcode.SUB,
    BinaryOperator.MULTIPLY: Opcode.MUL,
    BinaryOperator.DIVIDE: Opcode.DIV,
}
