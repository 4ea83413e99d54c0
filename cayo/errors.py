from __future__ import annotations


class CayoError(Exception):
    """ Base class for all Cayo errors"""
    pass


class CayoCompileError(CayoError):
    """ Raised when a chunk cannot be produced from its input"""
    pass


class BytecodeDecodeError(CayoCompileError):
    """ Raised when encoded bytecode is malformed"""


class CayoRuntimeError(CayoError):
    """Base class for faults that abort an interpretation.

    `pc` is the index of the faulting instruction (or the out-of-range fetch
    index) and `line` its source line, when known.
    """

    def __init__(self, message: str, pc: int | None = None, line: int | None = None):
        super().__init__(message)
        self.message = message
        self.pc = pc
        self.line = line


class StackUnderflow(CayoRuntimeError):
    """ Raised when popping from an empty operand stack"""


class TypeMismatch(CayoRuntimeError):
    """ Raised when an operation receives a constant kind it cannot handle"""


class ProgramCounterOutOfBounds(CayoRuntimeError):
    """ Raised when a fetch runs past the end of the code without RETURN"""


class UnknownConstantIndex(CayoRuntimeError):
    """ Raised when a constant index falls outside the constant pool"""
