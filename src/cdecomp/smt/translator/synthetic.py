"""
Synthetic operators: C operations encoded as uninterpreted Z3 functions.

The function name is only the serialized form of the operator; decoding
goes through `SyntheticOp.from_decl`, which validates name and arity.
"""
from enum import Enum
import z3

from ..errors import ConstructKind, ShapeMismatchError, UnsupportedConstructError


class SyntheticOp(Enum):
    ADDR_OF = "AddrOf"
    DEREF = "Deref"
    PAREN = "Paren"
    PTR_DECAY = "PtrDecay"
    PTR_TO_INT = "PtrToInt"
    INT_TO_PTR = "IntToPtr"
    ARRAY_SUB = "ArraySub"
    MEMBER = "Member"

    @property
    def arity(self) -> int:
        return _ARITY[self]

    def function(self, *sorts: z3.SortRef) -> z3.FuncDeclRef:
        """Declare the operator over the given domain sorts and range.

        Z3 overloads on sorts, so the same operator applied at different
        sorts yields distinct function symbols sharing one name.
        """
        if len(sorts) != self.arity + 1:
            raise ShapeMismatchError(
                f"{self.value} takes {self.arity} argument(s), got {len(sorts) - 1}")
        return z3.Function(self.value, *sorts)

    def apply(self, range_sort: z3.SortRef, *args: z3.ExprRef) -> z3.ExprRef:
        """Apply the operator to `args`, producing a term of `range_sort`."""
        decl = self.function(*[a.sort() for a in args], range_sort)
        return decl(*args)

    @classmethod
    def from_decl(cls, decl: z3.FuncDeclRef) -> "SyntheticOp":
        """Decode an uninterpreted function symbol.

        Raises:
            UnsupportedConstructError: Unknown name, or a known name used
                with the wrong arity
        """
        name = decl.name()
        try:
            op = cls(name)
        except ValueError:
            raise UnsupportedConstructError(ConstructKind.SYNTHETIC_FUNCTION, name) from None
        if decl.arity() != op.arity:
            raise UnsupportedConstructError(
                ConstructKind.SYNTHETIC_FUNCTION, f"{name}/{decl.arity()}")
        return op


_ARITY = {
    SyntheticOp.ADDR_OF: 1,
    SyntheticOp.DEREF: 1,
    SyntheticOp.PAREN: 1,
    SyntheticOp.PTR_DECAY: 1,
    SyntheticOp.PTR_TO_INT: 1,
    SyntheticOp.INT_TO_PTR: 2,
    SyntheticOp.ARRAY_SUB: 2,
    SyntheticOp.MEMBER: 2,
}
