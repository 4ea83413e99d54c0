from __future__ import annotations

from dataclasses import dataclass


class Constant:
    """A literal value held in a chunk's constant pool.

    Number is the only variant so far. LOAD_CONST does not care which variant
    it loads; operations that do care check the kind and fault otherwise.
    """

    __slots__ = ()

    kind: str = "constant"


@dataclass(frozen=True, eq=False)
class Number(Constant):
    value: float

    kind = "number"

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Number needs a real value, got {self.value!r}")
        # Stored as a double whatever was passed in
        object.__setattr__(self, "value", float(self.value))

    # IEEE comparison, so a NaN Number never equals itself
    def __eq__(self, other):
        if not isinstance(other, Number):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash(self.value)

    def __repr__(self) -> str:
        return f"Number({self.value!r})"

    def __str__(self) -> str:
        return repr(self.value)
