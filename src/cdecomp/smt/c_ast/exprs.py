"""
Expression nodes.

Expressions are immutable once built and keyed by identity, so the same
sub-expression object shared by two parents is one node. Use
`structurally_equal` to compare two trees observationally.
"""
from dataclasses import dataclass, field
from enum import Enum
import struct
from typing import Any, List, Tuple

from .decls import Decl, FieldDecl
from .types import CType


class UnaryOp(Enum):
    LNOT = "!"
    NOT = "~"
    MINUS = "-"
    PLUS = "+"
    ADDR_OF = "&"
    DEREF = "*"


class BinaryOp(Enum):
    LAND = "&&"
    LOR = "||"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    REM = "%"
    AND = "&"
    OR = "|"
    XOR = "^"
    SHL = "<<"
    SHR = ">>"


class CastKind(Enum):
    INTEGRAL_CAST = "IntegralCast"
    NULL_TO_POINTER = "NullToPointer"
    POINTER_TO_INTEGRAL = "PointerToIntegral"
    INTEGRAL_TO_POINTER = "IntegralToPointer"
    ARRAY_TO_POINTER_DECAY = "ArrayToPointerDecay"
    LVALUE_TO_RVALUE = "LValueToRValue"
    NO_OP = "NoOp"
    BIT_CAST = "BitCast"
    FLOATING_CAST = "FloatingCast"
    INTEGRAL_TO_FLOATING = "IntegralToFloating"
    FLOATING_TO_INTEGRAL = "FloatingToIntegral"


@dataclass(eq=False)
class Expr:
    """Base class for expression nodes."""

    def children(self) -> Tuple["Expr", ...]:
        return ()


@dataclass(eq=False)
class IntegerLiteral(Expr):
    value: int
    type: CType


@dataclass(eq=False)
class CharacterLiteral(Expr):
    value: int
    type: CType


_FLOAT_FORMATS = {16: "e", 32: "f", 64: "d"}


@dataclass(eq=False)
class FloatingLiteral(Expr):
    """Floating-point literal stored as its IEEE-754 bit pattern."""
    bits: int
    type: CType

    @property
    def value(self) -> float:
        fmt = _FLOAT_FORMATS.get(self.type.width)
        if fmt is None:
            raise ValueError(f"No Python float for {self.type.width}-bit literal")
        raw = self.bits.to_bytes(self.type.width // 8, "little")
        return struct.unpack("<" + fmt, raw)[0]


@dataclass(eq=False)
class DeclRefExpr(Expr):
    decl: Decl

    @property
    def type(self) -> CType:
        return self.decl.type


@dataclass(eq=False)
class UnaryOperator(Expr):
    op: UnaryOp
    operand: Expr
    type: CType

    def children(self):
        return (self.operand,)


@dataclass(eq=False)
class BinaryOperator(Expr):
    op: BinaryOp
    lhs: Expr
    rhs: Expr
    type: CType

    def children(self):
        return (self.lhs, self.rhs)


@dataclass(eq=False)
class CastExpr(Expr):
    kind: CastKind
    operand: Expr
    type: CType

    def children(self):
        return (self.operand,)


@dataclass(eq=False)
class CStyleCastExpr(CastExpr):
    """Explicit `(type)operand` cast."""


@dataclass(eq=False)
class ImplicitCastExpr(CastExpr):
    """Conversion inserted by the front end."""


@dataclass(eq=False)
class MemberExpr(Expr):
    base: Expr
    member: FieldDecl
    is_arrow: bool = False

    @property
    def type(self) -> CType:
        return self.member.type

    def children(self):
        return (self.base,)


@dataclass(eq=False)
class ArraySubscriptExpr(Expr):
    base: Expr
    index: Expr
    type: CType

    def children(self):
        return (self.base, self.index)


@dataclass(eq=False)
class ParenExpr(Expr):
    sub: Expr

    @property
    def type(self) -> CType:
        return self.sub.type

    def children(self):
        return (self.sub,)


@dataclass(eq=False)
class CallExpr(Expr):
    callee: Expr
    args: List[Expr] = field(default_factory=list)
    type: Any = None

    def children(self):
        return (self.callee, *self.args)


def _node_attrs(expr: Expr) -> Tuple[Any, ...]:
    """Non-child attributes that must match for two nodes to be equivalent."""
    if isinstance(expr, (IntegerLiteral, CharacterLiteral)):
        return (expr.value, expr.type)
    if isinstance(expr, FloatingLiteral):
        return (expr.bits, expr.type)
    if isinstance(expr, DeclRefExpr):
        return (id(expr.decl),)
    if isinstance(expr, (UnaryOperator, BinaryOperator)):
        return (expr.op, expr.type)
    if isinstance(expr, CastExpr):
        return (expr.kind, expr.type)
    if isinstance(expr, MemberExpr):
        return (id(expr.member), expr.is_arrow)
    if isinstance(expr, ArraySubscriptExpr):
        return (expr.type,)
    return ()


def structurally_equal(a: Expr, b: Expr) -> bool:
    """Check that two expression trees are observationally equivalent.

    Nodes must have the same class, operator or cast kind, type and
    literal value, refer to the same declarations, and have pairwise
    equivalent children.
    """
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if _node_attrs(a) != _node_attrs(b):
        return False
    ca, cb = a.children(), b.children()
    if len(ca) != len(cb):
        return False
    return all(structurally_equal(x, y) for x, y in zip(ca, cb))
