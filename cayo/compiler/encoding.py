"""Binary form of a chunk.

Layout (all integers big-endian):

    magic      b"CAYO"
    version    u8
    constants  u16 count, then per constant: u8 tag, 8-byte IEEE double
    code       u32 count, then per instruction: u8 opcode [u16 index for LOAD_CONST]
    lines      u32 run count, then per run: u32 line, u32 repeats

Lines are run-length encoded since consecutive instructions usually share one.
"""
from __future__ import annotations

import struct
from typing import List, Tuple

from cayo.errors import BytecodeDecodeError
from cayo.types.constant import Constant, Number

from .chunk import Chunk
from .instruction import LoadConstant, simple_instruction
from .opcodes import Opcode

MAGIC = b"CAYO"
FORMAT_VERSION = 1

TAG_NUMBER = 0x01

_DOUBLE = struct.Struct(">d")


def _u16(v: int) -> bytes:
    return bytes(((v >> 8) & 0xFF, v & 0xFF))


def _u32(v: int) -> bytes:
    return bytes(((v >> 24) & 0xFF, (v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF))


def line_runs(lines: List[int]) -> List[Tuple[int, int]]:
    """Collapse a line table into (line, repeats) runs."""
    runs: List[List[int]] = []
    for line in lines:
        if runs and runs[-1][0] == line:
            runs[-1][1] += 1
        else:
            runs.append([line, 1])
    return [(line, repeats) for line, repeats in runs]


def _encode_constant(value: Constant) -> bytes:
    if isinstance(value, Number):
        return bytes([TAG_NUMBER]) + _DOUBLE.pack(value.value)
    raise TypeError(f"Cannot encode constant of kind {value.kind!r}")


def encode_chunk(chunk: Chunk) -> bytes:
    if len(chunk.constants) > 0xFFFF:
        raise ValueError(f"Too many constants to encode: {len(chunk.constants)}")
    out = bytearray(MAGIC)
    out.append(FORMAT_VERSION)

    out += _u16(len(chunk.constants))
    for value in chunk.constants:
        out += _encode_constant(value)

    out += _u32(len(chunk.code))
    for instr in chunk.code:
        out.append(int(instr.opcode))
        if isinstance(instr, LoadConstant):
            if instr.index > 0xFFFF:
                raise ValueError(f"Constant index {instr.index} does not fit in u16")
            out += _u16(instr.index)

    runs = line_runs(chunk.lines)
    out += _u32(len(runs))
    for line, repeats in runs:
        if line < 0:
            raise ValueError(f"Cannot encode negative line number {line}")
        out += _u32(line)
        out += _u32(repeats)
    return bytes(out)


class _Reader:
    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def take(self, n: int, what: str) -> bytes:
        if self.pos + n > len(self.data):
            raise BytecodeDecodeError(
                f"Truncated bytecode reading {what} at offset {self.pos}: "
                f"need {n} bytes, have {len(self.data) - self.pos}"
            )
        chunk = self.data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def u8(self, what: str) -> int:
        return self.take(1, what)[0]

    def u16(self, what: str) -> int:
        b = self.take(2, what)
        return (b[0] << 8) | b[1]

    def u32(self, what: str) -> int:
        return int.from_bytes(self.take(4, what), "big")


def decode_chunk(data: bytes) -> Chunk:
    """Decode bytes produced by `encode_chunk`.

    The result satisfies the chunk invariants; anything that would break them
    raises BytecodeDecodeError.
    """
    r = _Reader(bytes(data))
    if r.take(len(MAGIC), "magic") != MAGIC:
        raise BytecodeDecodeError("Not a Cayo bytecode file (bad magic)")
    version = r.u8("version")
    if version != FORMAT_VERSION:
        raise BytecodeDecodeError(f"Unsupported bytecode version {version}")

    chunk = Chunk()
    for _ in range(r.u16("constant count")):
        offset = r.pos
        tag = r.u8("constant tag")
        if tag != TAG_NUMBER:
            raise BytecodeDecodeError(f"Unknown constant tag 0x{tag:02X} at offset {offset}")
        chunk.add_constant(Number(_DOUBLE.unpack(r.take(8, "number"))[0]))

    code = []
    for _ in range(r.u32("instruction count")):
        offset = r.pos
        raw = r.u8("opcode")
        try:
            op = Opcode(raw)
        except ValueError:
            raise BytecodeDecodeError(f"Unknown opcode 0x{raw:02X} at offset {offset}") from None
        if op == Opcode.LOAD_CONST:
            idx = r.u16("constant index")
            if idx >= len(chunk.constants):
                raise BytecodeDecodeError(
                    f"Constant index {idx} at offset {offset} outside pool of {len(chunk.constants)}"
                )
            code.append(LoadConstant(idx))
        else:
            code.append(simple_instruction(op))

    lines: List[int] = []
    for _ in range(r.u32("line run count")):
        line = r.u32("line")
        repeats = r.u32("line repeats")
        if repeats == 0:
            raise BytecodeDecodeError(f"Empty line run for line {line}")
        if len(lines) + repeats > len(code):
            raise BytecodeDecodeError(
                f"Line table covers more than the {len(code)} instructions in the code"
            )
        lines.extend([line] * repeats)
    if len(lines) != len(code):
        raise BytecodeDecodeError(
            f"Line table covers {len(lines)} instructions, code has {len(code)}"
        )
    if r.pos != len(r.data):
        raise BytecodeDecodeError(f"{len(r.data) - r.pos} trailing bytes after chunk")

    for instr, line in zip(code, lines):
        chunk.write(instr, line)
    return chunk
