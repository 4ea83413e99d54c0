"""Command-line front end: run, disassemble, or demo encoded chunks."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from cayo import config
from cayo.compiler import (
    BinaryOperator,
    BytecodeLoader,
    Chunk,
    InterpretResult,
    VM,
    decode_chunk,
    disassemble_chunk,
)
from cayo.errors import CayoCompileError

# sysexits.h, as clox uses them
EXIT_OK = 0
EXIT_DATAERR = 65
EXIT_SOFTWARE = 70
EXIT_IOERR = 74

_EXIT_CODES = {
    InterpretResult.OK: EXIT_OK,
    InterpretResult.COMPILE_ERROR: EXIT_DATAERR,
    InterpretResult.RUNTIME_ERROR: EXIT_SOFTWARE,
}


def demo_chunk() -> Chunk:
    """(1.2 + 3.6) / 5.8, all on line 123."""
    chunk = Chunk()
    chunk.emit_constant(1.2, 123)
    chunk.emit_constant(3.6, 123)
    chunk.emit_binary(BinaryOperator.ADD, 123)
    chunk.emit_constant(5.8, 123)
    chunk.emit_binary(BinaryOperator.DIVIDE, 123)
    chunk.emit_return(123)
    return chunk


def _read_bytes(path: str) -> Optional[bytes]:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        print(f"Could not read file \"{path}\": {e.strerror or e}", file=sys.stderr)
        return None


class DisassemblingLoader(BytecodeLoader):
    """BytecodeLoader that prints the chunk it decoded."""

    def __init__(self, label: str):
        self.label = label

    def compile(self, source: bytes) -> Chunk:
        chunk = super().compile(source)
        disassemble_chunk(chunk, self.label)
        return chunk


def cmd_run(args: argparse.Namespace) -> int:
    data = _read_bytes(args.file)
    if data is None:
        return EXIT_IOERR
    if args.disassemble or config.disasm_enabled():
        loader = DisassemblingLoader(args.file)
    else:
        loader = BytecodeLoader()
    vm = VM(trace=args.trace)
    return _EXIT_CODES[vm.interpret_source(data, loader).result]


def cmd_disasm(args: argparse.Namespace) -> int:
    data = _read_bytes(args.file)
    if data is None:
        return EXIT_IOERR
    try:
        chunk = decode_chunk(data)
    except CayoCompileError as e:
        print(f"CompileError: {e}", file=sys.stderr)
        return EXIT_DATAERR
    disassemble_chunk(chunk, args.label or args.file)
    return EXIT_OK


def cmd_demo(args: argparse.Namespace) -> int:
    chunk = demo_chunk()
    if args.output:
        try:
            Path(args.output).write_bytes(chunk.to_bytes())
        except OSError as e:
            print(f"Could not write file \"{args.output}\": {e.strerror or e}", file=sys.stderr)
            return EXIT_IOERR
    disassemble_chunk(chunk, "demo")
    vm = VM(trace=args.trace)
    return _EXIT_CODES[vm.interpret(chunk).result]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cayo", description="Cayo bytecode virtual machine")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="run an encoded chunk")
    run.add_argument("file")
    run.add_argument("--trace", action="store_true", default=None,
                     help="print the stack and each instruction as it executes")
    run.add_argument("--disassemble", action="store_true",
                     help="disassemble the chunk before running it")
    run.set_defaults(func=cmd_run)

    dis = sub.add_parser("disasm", help="disassemble an encoded chunk")
    dis.add_argument("file")
    dis.add_argument("--label", help="header label (defaults to the file name)")
    dis.set_defaults(func=cmd_disasm)

    demo = sub.add_parser("demo", help="build, disassemble and run (1.2 + 3.6) / 5.8")
    demo.add_argument("--output", help="also write the encoded chunk here")
    demo.add_argument("--trace", action="store_true", default=None)
    demo.set_defaults(func=cmd_demo)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
