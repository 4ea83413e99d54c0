from __future__ import annotations

# Public surface for the compiler package
from .opcodes import Opcode, BinaryOperator
from .instruction import Instruction, LoadConstant, Negate, BinaryOp, Return
from .chunk import Chunk
from .encoding import encode_chunk, decode_chunk
from .disasm import disassemble_chunk, disassemble_instruction, disassemble
from .backend import Compiler, BytecodeLoader
from .vm import VM, VMState, InterpretResult, Interpretation

__all__ = [
    "Opcode",
    "BinaryOperator",
    "Instruction",
    "LoadConstant",
    "Negate",
    "BinaryOp",
    "Return",
    "Chunk",
    "encode_chunk",
    "decode_chunk",
    "disassemble_chunk",
    "disassemble_instruction",
    "disassemble",
    "Compiler",
    "BytecodeLoader",
    "VM",
    "VMState",
    "InterpretResult",
    "Interpretation",
]
