from __future__ import annotations
from typing import Protocol

from .chunk import Chunk
from .encoding import decode_chunk


class Compiler(Protocol):
    """Anything that turns some input into a Chunk.

    Implementations raise CayoCompileError when the input is rejected; the VM
    reports that as COMPILE_ERROR without looking inside it.
    """
    def compile(self, source) -> Chunk: ...


class BytecodeLoader:
    """
    Compiler backend whose input is already-encoded bytecode: decoding is the
    whole compile step, so a malformed file fails like a translator would.
    """

    def compile(self, source: bytes) -> Chunk:
        return decode_chunk(source)
