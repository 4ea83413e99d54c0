import io
from timeit import timeit

from cayo.compiler import Chunk, BinaryOperator, VM, encode_chunk, decode_chunk, disassemble


def arith_chain(n_ops: int) -> Chunk:
    """1 + 1 + ... (n_ops additions), one statement per line."""
    chunk = Chunk()
    chunk.emit_constant(1.0, 1)
    for i in range(n_ops):
        chunk.emit_constant(1.0, i + 1)
        chunk.emit_binary(BinaryOperator.ADD, i + 1)
    chunk.emit_return(n_ops + 1)
    return chunk


def time_vm(chunk: Chunk, rounds: int, trace: bool = False) -> float:
    """Time VM execution only; the chunk is built once up front."""
    vm = VM(trace=trace, out=io.StringIO())
    # Warmup
    vm.run(chunk)
    # Timed
    return timeit(lambda: vm.run(chunk), number=rounds)


def time_codec(chunk: Chunk, rounds: int) -> float:
    data = encode_chunk(chunk)
    return timeit(lambda: decode_chunk(data), number=rounds)


def time_disasm(chunk: Chunk, rounds: int) -> float:
    return timeit(lambda: disassemble(chunk, "bench"), number=rounds)


if __name__ == "__main__":
    chunk = arith_chain(1000)
    print(f"Benchmark: {len(chunk)} instructions")
    print(f"  vm run:        {time_vm(chunk, rounds=200):.6f}s  [rounds=200]")
    print(f"  vm run traced: {time_vm(chunk, rounds=20, trace=True):.6f}s  [rounds=20]")
    print(f"  decode:        {time_codec(chunk, rounds=200):.6f}s  [rounds=200]")
    print(f"  disassemble:   {time_disasm(chunk, rounds=200):.6f}s  [rounds=200]")
