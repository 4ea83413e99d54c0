from __future__ import annotations
import sys
from typing import TextIO

from cayo.errors import UnknownConstantIndex

from .chunk import Chunk
from .instruction import Instruction, LoadConstant

# Printed instead of the line number when it repeats the previous instruction's
SAME_LINE = "   | "


def format_header(label: str) -> str:
    return f"=== {label} ==="


def format_instruction(chunk: Chunk, instruction: Instruction, pc: int) -> str:
    text = f"{pc:04d} "
    if pc > 0 and chunk.get_line(pc) == chunk.get_line(pc - 1):
        text += SAME_LINE
    else:
        text += f"{chunk.get_line(pc):4d} "

    name = instruction.opcode.name
    if isinstance(instruction, LoadConstant):
        try:
            operand = repr(chunk.get_constant(instruction.index))
        except UnknownConstantIndex:
            operand = f"<unknown constant {instruction.index}>"
        return f"{text}{name:<16} {operand}"
    return text + name


def disassemble_instruction(chunk: Chunk, instruction: Instruction, pc: int,
                            out: TextIO | None = None) -> None:
    """Print one instruction. Used by disassemble_chunk and the VM trace alike."""
    print(format_instruction(chunk, instruction, pc), file=sys.stdout if out is None else out)


def disassemble_chunk(chunk: Chunk, label: str, out: TextIO | None = None) -> None:
    out = sys.stdout if out is None else out
    print(format_header(label), file=out)
    for pc, instruction in enumerate(chunk.code):
        disassemble_instruction(chunk, instruction, pc, out)


def disassemble(chunk: Chunk, label: str) -> str:
    """Disassembly as a string, one instruction per line."""
    lines = [format_header(label)]
    lines.extend(format_instruction(chunk, instr, pc) for pc, instr in enumerate(chunk.code))
    return "\n".join(lines)
