# Public surface for Cayo.
# Runtime values and pool entries are both Constant instances; the only
# variant so far is Number, which wraps a Python float (an IEEE double).

from cayo.types.constant import Constant, Number

from cayo.errors import (
    CayoError,
    CayoCompileError,
    BytecodeDecodeError,
    CayoRuntimeError,
    StackUnderflow,
    TypeMismatch,
    ProgramCounterOutOfBounds,
    UnknownConstantIndex,
)
from cayo.compiler import (
    Opcode,
    BinaryOperator,
    LoadConstant,
    Negate,
    BinaryOp,
    Return,
    Instruction,
    Chunk,
    VM,
    VMState,
    InterpretResult,
    Interpretation,
    disassemble_chunk,
    disassemble_instruction,
)

__version__ = "0.1.0"
