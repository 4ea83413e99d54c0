import struct

import pytest

from cayo.compiler import Chunk, BinaryOperator, LoadConstant, encode_chunk, decode_chunk
from cayo.compiler.encoding import MAGIC, line_runs
from cayo.errors import BytecodeDecodeError, CayoCompileError
from cayo.types.constant import Number


def small_chunk() -> Chunk:
    chunk = Chunk()
    chunk.emit_constant(1.0, 1)
    chunk.emit_return(1)
    return chunk


def test_exact_layout():
    assert encode_chunk(small_chunk()) == (
        MAGIC + b"\x01"
        + b"\x00\x01" + b"\x01" + struct.pack(">d", 1.0)
        + b"\x00\x00\x00\x02" + b"\x01\x00\x00" + b"\x20"
        + b"\x00\x00\x00\x01" + b"\x00\x00\x00\x01" + b"\x00\x00\x00\x02"
    )


def test_decode_restores_chunk():
    chunk = Chunk()
    chunk.emit_constant(1.2, 123)
    chunk.emit_constant(3.6, 123)
    chunk.emit_binary(BinaryOperator.ADD, 123)
    chunk.emit_negate(124)
    chunk.emit_constant(-0.5, 130)
    chunk.emit_binary(BinaryOperator.DIVIDE, 130)
    chunk.emit_return(131)

    assert Chunk.from_bytes(chunk.to_bytes()) == chunk


def test_line_runs():
    assert line_runs([]) == []
    assert line_runs([5, 5, 5, 6, 5]) == [(5, 3), (6, 1), (5, 1)]


def _corrupt(data: bytes, offset: int, value: int) -> bytes:
    b = bytearray(data)
    b[offset] = value
    return bytes(b)


@pytest.mark.parametrize(
    "mangle,fragment",
    [
        (lambda d: b"NOPE" + d[4:], "bad magic"),
        (lambda d: _corrupt(d, 4, 9), "version"),
        (lambda d: _corrupt(d, 7, 0x07), "constant tag"),
        (lambda d: d[:10], "Truncated"),
        (lambda d: d + b"\x00", "trailing"),
        # opcode byte of the first instruction
        (lambda d: _corrupt(d, 20, 0x7F), "Unknown opcode"),
        # constant index of the LOAD_CONST
        (lambda d: _corrupt(d, 22, 0x05), "outside pool"),
        # repeat count of the only line run
        (lambda d: _corrupt(d, 35, 0x03), "Line table"),
        (lambda d: _corrupt(d, 35, 0x00), "Empty line run"),
    ]
)
def test_malformed_bytecode_is_rejected(mangle, fragment):
    with pytest.raises(BytecodeDecodeError, match=fragment):
        decode_chunk(mangle(encode_chunk(small_chunk())))


def test_decode_error_is_a_compile_error():
    assert issubclass(BytecodeDecodeError, CayoCompileError)


def test_encode_refuses_unencodable_chunks():
    chunk = Chunk()
    chunk.write(LoadConstant(0x10000), 1)
    chunk.add_constant(Number(1))
    with pytest.raises(ValueError):
        encode_chunk(chunk)
