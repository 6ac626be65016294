"""
Factories for expression nodes.
"""
import struct

from .context import ASTContext
from .decls import Decl, FieldDecl
from .exprs import (
    ArraySubscriptExpr, BinaryOp, BinaryOperator, CastKind, CharacterLiteral,
    CStyleCastExpr, DeclRefExpr, Expr, FloatingLiteral, ImplicitCastExpr,
    IntegerLiteral, MemberExpr, ParenExpr, UnaryOp, UnaryOperator
)
from .types import CType

_PACK_FORMATS = {16: "<e", 32: "<f", 64: "<d"}


def _truncate(value: int, type: CType) -> int:
    return value & ((1 << type.width) - 1)


def integer_literal(value: int, type: CType) -> IntegerLiteral:
    """Integer literal holding `value` in the fixed-width representation of `type`."""
    return IntegerLiteral(_truncate(value, type), type)


def character_literal(value: int, type: CType) -> CharacterLiteral:
    return CharacterLiteral(_truncate(value, type), type)


def floating_literal(value: float, type: CType) -> FloatingLiteral:
    """Floating literal from a Python float (16, 32 and 64-bit types)."""
    fmt = _PACK_FORMATS.get(type.width)
    if fmt is None:
        raise ValueError(f"Cannot pack a Python float into {type.width} bits")
    bits = int.from_bytes(struct.pack(fmt, value), "little")
    return FloatingLiteral(bits, type)


def floating_literal_from_bits(bits: int, type: CType) -> FloatingLiteral:
    return FloatingLiteral(_truncate(bits, type), type)


def decl_ref(decl: Decl) -> DeclRefExpr:
    return DeclRefExpr(decl)


def not_expr(ctx: ASTContext, sub: Expr) -> UnaryOperator:
    """Logical negation; `!e` has type int."""
    return UnaryOperator(UnaryOp.LNOT, sub, ctx.int_ty)


def unary(op: UnaryOp, sub: Expr, type: CType) -> UnaryOperator:
    return UnaryOperator(op, sub, type)


def binary(op: BinaryOp, lhs: Expr, rhs: Expr, type: CType) -> BinaryOperator:
    return BinaryOperator(op, lhs, rhs, type)


def cstyle_cast(type: CType, kind: CastKind, sub: Expr) -> CStyleCastExpr:
    return CStyleCastExpr(kind, sub, type)


def implicit_cast(type: CType, kind: CastKind, sub: Expr) -> ImplicitCastExpr:
    return ImplicitCastExpr(kind, sub, type)


def member(base: Expr, field: FieldDecl, is_arrow: bool = False) -> MemberExpr:
    return MemberExpr(base, field, is_arrow)


def array_subscript(base: Expr, index: Expr, type: CType) -> ArraySubscriptExpr:
    return ArraySubscriptExpr(base, index, type)


def paren(sub: Expr) -> ParenExpr:
    return ParenExpr(sub)
