from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, TextIO, Tuple

from cayo import config
from cayo.errors import (
    CayoError,
    CayoCompileError,
    CayoRuntimeError,
    StackUnderflow,
    TypeMismatch,
    ProgramCounterOutOfBounds,
)
from cayo.types.constant import Constant, Number

from .backend import Compiler
from .chunk import Chunk
from .disasm import disassemble_instruction, format_header
from .instruction import Instruction
from .opcodes import Opcode

TRACE_INDENT = " " * 10


class VMState(Enum):
    READY = "ready"
    RUNNING = "running"
    HALTED = "halted"
    FAULTED = "faulted"


class InterpretResult(Enum):
    OK = 0
    COMPILE_ERROR = 1
    RUNTIME_ERROR = 2


@dataclass
class Interpretation:
    result: InterpretResult
    value: Constant | None = None
    error: CayoError | None = None

    @property
    def ok(self) -> bool:
        return self.result is InterpretResult.OK


def ieee_divide(a: float, b: float) -> float:
    # Python raises on float division by zero; IEEE 754 gives inf or nan
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


class VM:
    """
    Stack machine for one chunk at a time.

    A single VM can serve many interpretations (e.g. a REPL). Each `run`
    takes over the chunk, resets the operand stack and program counter, and
    ends either HALTED by RETURN or FAULTED by a CayoRuntimeError. The stack
    left behind stays inspectable until the next run.
    """

    class RunSignal:
        NORMAL = 0
        RETURN = 1

    def __init__(self, trace: bool | None = None, out: TextIO | None = None,
                 err: TextIO | None = None):
        self.trace = config.trace_enabled() if trace is None else trace
        self._out = out
        self._err = err
        self.chunk = Chunk()
        self.stack: List[Constant] = []
        # Program counter: index of the next instruction to fetch
        self.pc = 0
        self.state = VMState.READY
        # Opcode dispatch table
        self._dispatch: dict[Opcode, Callable[[Instruction], Tuple[int, Any | None]]] = {}
        self._init_dispatch()

    @property
    def out(self) -> TextIO:
        return sys.stdout if self._out is None else self._out

    @property
    def err(self) -> TextIO:
        return sys.stderr if self._err is None else self._err

    def _init_dispatch(self) -> None:
        d = self._dispatch
        d[Opcode.LOAD_CONST] = self.op_load_const
        d[Opcode.NEGATE] = self.op_negate
        d[Opcode.ADD] = self.op_add
        d[Opcode.SUB] = self.op_sub
        d[Opcode.MUL] = self.op_mul
        d[Opcode.DIV] = self.op_div
        d[Opcode.RETURN] = self.op_return

    # --- Per-op handlers ---
    def op_load_const(self, instr: Instruction) -> Tuple[int, Any | None]:
        self.push(self.chunk.get_constant(instr.index))
        return VM.RunSignal.NORMAL, None

    def op_negate(self, instr: Instruction) -> Tuple[int, Any | None]:
        operand = self.pop()
        if not isinstance(operand, Number):
            raise TypeMismatch(f"Operand must be a number, got {operand.kind}.")
        self.push(Number(-operand.value))
        return VM.RunSignal.NORMAL, None

    def _arith2(self, opfun: Callable[[float, float], float]) -> Tuple[int, Any | None]:
        # Top of stack is the right operand: it was pushed last
        b = self.pop()
        a = self.pop()
        if not isinstance(a, Number) or not isinstance(b, Number):
            raise TypeMismatch(f"Operands must be numbers, got {a.kind} and {b.kind}.")
        self.push(Number(opfun(a.value, b.value)))
        return VM.RunSignal.NORMAL, None

    def op_add(self, instr: Instruction) -> Tuple[int, Any | None]:
        return self._arith2(lambda a, b: a + b)

    def op_sub(self, instr: Instruction) -> Tuple[int, Any | None]:
        return self._arith2(lambda a, b: a - b)

    def op_mul(self, instr: Instruction) -> Tuple[int, Any | None]:
        return self._arith2(lambda a, b: a * b)

    def op_div(self, instr: Instruction) -> Tuple[int, Any | None]:
        return self._arith2(ieee_divide)

    def op_return(self, instr: Instruction) -> Tuple[int, Any | None]:
        value = self.pop()
        print(value, file=self.out)
        return VM.RunSignal.RETURN, value

    # --- Stack helpers ---
    def push(self, v: Constant) -> None:
        self.stack.append(v)

    def pop(self) -> Constant:
        if not self.stack:
            raise StackUnderflow("Stack underflow: pop from an empty stack.")
        return self.stack.pop()

    # --- Execution ---
    def reset(self) -> None:
        """Start a fresh interpretation: empty stack, pc at 0, READY."""
        self.stack.clear()
        self.pc = 0
        self.state = VMState.READY

    def _print_stack(self) -> None:
        if not self.stack:
            print(f"{TRACE_INDENT}[]", file=self.out)
        else:
            print(TRACE_INDENT + "".join(f"[ {v} ]" for v in self.stack), file=self.out)

    def _fetch(self) -> Instruction:
        pc = self.pc
        if pc >= len(self.chunk.code):
            raise ProgramCounterOutOfBounds(
                f"Program counter {pc} ran past the end of the code "
                f"({len(self.chunk.code)} instructions) without RETURN.",
                pc=pc,
            )
        instruction = self.chunk.code[pc]
        if self.trace:
            self._print_stack()
            disassemble_instruction(self.chunk, instruction, pc, self.out)
        self.pc += 1
        return instruction

    def run(self, chunk: Chunk) -> Constant:
        """Execute `chunk` until RETURN and give back the returned value.

        Faults propagate as CayoRuntimeError with `pc` and `line` filled in.
        """
        self.chunk = chunk
        self.reset()
        self.state = VMState.RUNNING
        if self.trace:
            print(format_header("trace"), file=self.out)
        try:
            while True:
                instruction = self._fetch()
                signal, value = self._dispatch[instruction.opcode](instruction)
                if signal == VM.RunSignal.RETURN:
                    self.state = VMState.HALTED
                    return value
        except CayoRuntimeError as e:
            self.state = VMState.FAULTED
            if e.pc is None:
                # Raised by a handler: the faulting instruction was the last fetched
                e.pc = self.pc - 1
                e.line = self.chunk.get_line(e.pc)
            raise

    def interpret(self, chunk: Chunk) -> Interpretation:
        try:
            value = self.run(chunk)
        except CayoRuntimeError as e:
            self._report("RuntimeError", e)
            if e.line is not None:
                print(f"[line {e.line}] in script", file=self.err)
            return Interpretation(InterpretResult.RUNTIME_ERROR, error=e)
        return Interpretation(InterpretResult.OK, value)

    def interpret_source(self, source, compiler: Compiler) -> Interpretation:
        try:
            chunk = compiler.compile(source)
        except CayoCompileError as e:
            # Nothing ran: drop the previous chunk and leave the VM READY
            self.chunk = Chunk()
            self.reset()
            self._report("CompileError", e)
            return Interpretation(InterpretResult.COMPILE_ERROR, error=e)
        return self.interpret(chunk)

    def _report(self, kind: str, error: CayoError) -> None:
        print(f"{kind}: {error}", file=self.err)
