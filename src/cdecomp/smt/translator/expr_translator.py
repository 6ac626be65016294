"""
C expression to Z3 term translator.

Translates typed C expression nodes bottom-up with:
- Per-context memoization (children resolved through the context)
- C truthiness via a single boolean-cast helper
- Width-driven integral casts (extend, truncate, pass through)
- Uninterpreted functions for pointers, members, subscripts and parens
"""

import logging
from typing import TYPE_CHECKING
import z3

from ..c_ast import (
    ArraySubscriptExpr, BinaryOp, BinaryOperator, CallExpr, CastExpr,
    CastKind, CharacterLiteral, Decl, DeclRefExpr, Expr, FieldDecl,
    FloatingLiteral, IntegerLiteral, MemberExpr, ParenExpr, UnaryOp,
    UnaryOperator, VarDecl,
)
from ..errors import ConstructKind, ShapeMismatchError, UnsupportedConstructError
from .synthetic import SyntheticOp

if TYPE_CHECKING:
    from .translation_context import TranslationContext

logger = logging.getLogger(__name__)

TYPE_TAG_SORT = "!TypeTag"

# Casts that do not change the value representation
_TRANSPARENT_CASTS = (CastKind.LVALUE_TO_RVALUE, CastKind.NO_OP)

_WIDTH_CASTS = (
    CastKind.INTEGRAL_CAST,
    CastKind.NULL_TO_POINTER,
    CastKind.POINTER_TO_INTEGRAL,
    CastKind.INTEGRAL_TO_POINTER,
)


def decl_symbol_name(decl: Decl) -> str:
    """Unique, readable constant name for a declaration.

    Variables: '<hex id>_<name>'. Fields: '<hex id of record>_<record>_<field>'.
    """
    if isinstance(decl, FieldDecl):
        parent = decl.parent
        return f"{id(parent):x}_{parent.name}_{decl.name}"
    return f"{id(decl):x}_{decl.name}"


class ExprToZ3Translator:
    """Translates C expressions and declarations to Z3 terms and symbols."""

    def translate(self, expr: Expr, ctx: "TranslationContext") -> z3.ExprRef:
        """Translate an expression to a Z3 term.

        Children are resolved with `ctx.term`, so each is translated once.

        Args:
            expr: Expression node
            ctx: Translation context

        Returns:
            Z3 term
        """
        if isinstance(expr, BinaryOperator):
            return self.translate_bin(expr, ctx)
        elif isinstance(expr, UnaryOperator):
            return self.translate_unary(expr, ctx)
        elif isinstance(expr, (IntegerLiteral, CharacterLiteral)):
            return self.translate_literal(expr, ctx)
        elif isinstance(expr, FloatingLiteral):
            return self.translate_floating(expr, ctx)
        elif isinstance(expr, DeclRefExpr):
            return self.translate_decl_ref(expr, ctx)
        elif isinstance(expr, CastExpr):
            return self.translate_cast(expr, ctx)
        elif isinstance(expr, MemberExpr):
            return self.translate_member(expr, ctx)
        elif isinstance(expr, ArraySubscriptExpr):
            return self.translate_array_subscript(expr, ctx)
        elif isinstance(expr, ParenExpr):
            return self.translate_paren(expr, ctx)
        elif isinstance(expr, CallExpr):
            raise UnsupportedConstructError(ConstructKind.EXPRESSION, "call")
        else:
            raise UnsupportedConstructError(ConstructKind.EXPRESSION, type(expr).__name__)

    def translate_decl(self, decl: Decl, ctx: "TranslationContext") -> z3.FuncDeclRef:
        """Create the 0-ary symbol for a variable or field declaration."""
        logger.debug("Declaring %s %s", type(decl).__name__, decl.name)
        if not isinstance(decl, (VarDecl, FieldDecl)):
            raise UnsupportedConstructError(ConstructKind.DECLARATION, type(decl).__name__)
        sort = ctx.types.sort_of(decl.type)
        return z3.Const(decl_symbol_name(decl), sort).decl()

    def bool_cast(self, term: z3.ExprRef, ctx: "TranslationContext") -> z3.ExprRef:
        """C truthiness: `term != 0` for non-boolean terms, else `term`.

        Floating-point terms compare with IEEE inequality, so -0.0 is false
        and NaN is true.
        """
        if z3.is_bool(term):
            return term
        zero = ctx.types.zero_of(term.sort())
        if z3.is_fp(term):
            cast = z3.fpNEQ(term, zero)
        else:
            cast = term != zero
        if ctx.options.simplify_bool_casts:
            cast = z3.simplify(cast)
        return cast

    def bitwise_cast(self, term: z3.ExprRef, src: int, dst: int,
                     signed: bool) -> z3.ExprRef:
        """Resize a bitvector from `src` to `dst` bits.

        Extends (sign-extends iff `signed`), keeps the low `dst` bits, or
        returns `term` unchanged when the widths agree.
        """
        if not z3.is_bv(term):
            raise ShapeMismatchError(f"Cast operand is not a bitvector: {term}")
        if term.size() != src:
            raise ShapeMismatchError(
                f"Cast source width {src} does not match operand width {term.size()}")
        if dst <= 0:
            raise ShapeMismatchError(f"Invalid cast destination width: {dst}")

        diff = dst - src
        if diff > 0:
            return z3.SignExt(diff, term) if signed else z3.ZeroExt(diff, term)
        if diff < 0:
            return z3.Extract(dst - 1, 0, term)
        return term

    def translate_literal(self, expr: Expr, ctx: "TranslationContext") -> z3.ExprRef:
        logger.debug("VisitLiteral: %d", expr.value)
        sort = ctx.types.sort_of(expr.type)
        if sort.kind() not in (z3.Z3_BOOL_SORT, z3.Z3_BV_SORT):
            raise ShapeMismatchError(f"Integer literal of type {expr.type}")
        return ctx.types.value_of(expr, sort)

    def translate_floating(self, expr: FloatingLiteral, ctx: "TranslationContext") -> z3.ExprRef:
        sort = ctx.types.sort_of(expr.type)
        if sort.kind() != z3.Z3_FLOATING_POINT_SORT:
            raise ShapeMismatchError(f"Floating literal of type {expr.type}")
        return ctx.types.value_of(expr, sort)

    def translate_decl_ref(self, expr: DeclRefExpr, ctx: "TranslationContext") -> z3.ExprRef:
        logger.debug("VisitDeclRefExpr: %s", expr.decl.name)
        return ctx.symbol(expr.decl)()

    def translate_unary(self, expr: UnaryOperator, ctx: "TranslationContext") -> z3.ExprRef:
        logger.debug("VisitUnaryOperator: %s", expr.op.value)
        operand = ctx.term(expr.operand)

        if expr.op == UnaryOp.LNOT:
            return z3.Not(self.bool_cast(operand, ctx))
        elif expr.op == UnaryOp.ADDR_OF:
            return SyntheticOp.ADDR_OF.apply(ctx.types.sort_of(expr.type), operand)
        elif expr.op == UnaryOp.DEREF:
            return SyntheticOp.DEREF.apply(ctx.types.sort_of(expr.type), operand)
        elif expr.op == UnaryOp.PLUS:
            return operand

        self._require_bv(operand, expr.op)
        if expr.op == UnaryOp.MINUS:
            return -operand
        elif expr.op == UnaryOp.NOT:
            return ~operand
        raise UnsupportedConstructError(ConstructKind.UNARY_OPERATOR, expr.op.value)

    def translate_bin(self, expr: BinaryOperator, ctx: "TranslationContext") -> z3.ExprRef:
        """Translate binary operation; signedness comes from the C operand types."""
        logger.debug("VisitBinaryOperator: %s", expr.op.value)
        lhs = ctx.term(expr.lhs)
        rhs = ctx.term(expr.rhs)
        op = expr.op

        if op == BinaryOp.LAND:
            return z3.And(self.bool_cast(lhs, ctx), self.bool_cast(rhs, ctx))
        elif op == BinaryOp.LOR:
            return z3.Or(self.bool_cast(lhs, ctx), self.bool_cast(rhs, ctx))

        self._require_same_sort(lhs, rhs, op)
        if z3.is_fp(lhs) and op in (BinaryOp.EQ, BinaryOp.NE):
            return z3.fpEQ(lhs, rhs) if op == BinaryOp.EQ else z3.fpNEQ(lhs, rhs)
        if op == BinaryOp.EQ:
            return lhs == rhs
        elif op == BinaryOp.NE:
            return lhs != rhs

        self._require_bv(lhs, op)
        lhs_signed = expr.lhs.type.is_signed_integer()
        is_signed = lhs_signed or expr.rhs.type.is_signed_integer()

        if op == BinaryOp.ADD:
            return lhs + rhs
        elif op == BinaryOp.SUB:
            return lhs - rhs
        elif op == BinaryOp.MUL:
            return lhs * rhs
        elif op == BinaryOp.DIV:
            return lhs / rhs if lhs_signed else z3.UDiv(lhs, rhs)
        elif op == BinaryOp.REM:
            return z3.SRem(lhs, rhs)
        elif op == BinaryOp.AND:
            return lhs & rhs
        elif op == BinaryOp.OR:
            return lhs | rhs
        elif op == BinaryOp.XOR:
            return lhs ^ rhs
        elif op == BinaryOp.SHL:
            return lhs << rhs
        elif op == BinaryOp.SHR:
            return lhs >> rhs if lhs_signed else z3.LShR(lhs, rhs)
        elif op == BinaryOp.LT:
            return lhs < rhs if is_signed else z3.ULT(lhs, rhs)
        elif op == BinaryOp.LE:
            return lhs <= rhs if is_signed else z3.ULE(lhs, rhs)
        elif op == BinaryOp.GT:
            return lhs > rhs if is_signed else z3.UGT(lhs, rhs)
        elif op == BinaryOp.GE:
            return lhs >= rhs if is_signed else z3.UGE(lhs, rhs)
        raise UnsupportedConstructError(ConstructKind.BINARY_OPERATOR, op.value)

    def translate_cast(self, expr: CastExpr, ctx: "TranslationContext") -> z3.ExprRef:
        """Translate C-style and implicit casts."""
        logger.debug("VisitCastExpr: %s", expr.kind.value)
        sub = ctx.term(expr.operand)
        kind = expr.kind

        if kind in _TRANSPARENT_CASTS:
            return sub

        if kind == CastKind.ARRAY_TO_POINTER_DECAY:
            if not z3.is_bv(sub):
                raise ShapeMismatchError("Pointer cast operand is not a bitvector")
            return SyntheticOp.PTR_DECAY.apply(ctx.types.sort_of(expr.type), sub)

        if kind not in _WIDTH_CASTS:
            raise UnsupportedConstructError(ConstructKind.CAST_KIND, kind.value)

        t_src = expr.operand.type
        t_dst = expr.type
        cast = self.bitwise_cast(sub, t_src.width, t_dst.width, t_src.is_signed_integer())

        if kind == CastKind.POINTER_TO_INTEGRAL:
            return SyntheticOp.PTR_TO_INT.apply(cast.sort(), sub)

        if kind == CastKind.INTEGRAL_TO_POINTER:
            tag = self.type_tag(t_dst, ctx)
            return SyntheticOp.INT_TO_PTR.apply(cast.sort(), tag, sub)

        if ctx.options.record_cast_types and t_dst.is_integer() and not cast.eq(sub):
            ctx.registry.record_cast_type(cast, t_dst)
        return cast

    def type_tag(self, type, ctx: "TranslationContext") -> z3.ExprRef:
        """Get or create the constant standing for a C type in `IntToPtr`."""
        tag = ctx.registry.lookup_type_tag(type)
        if tag is None:
            sort = z3.DeclareSort(TYPE_TAG_SORT, ctx.z3_ctx)
            n = ctx.registry.counts()["type tags"]
            tag = z3.Const(f"{type}!{n}", sort)
            ctx.registry.insert_type_tag(tag, type)
        return tag

    def translate_array_subscript(self, expr: ArraySubscriptExpr,
                                  ctx: "TranslationContext") -> z3.ExprRef:
        logger.debug("VisitArraySubscriptExpr")
        base = ctx.term(expr.base)
        if not z3.is_bv(base):
            raise ShapeMismatchError(f"Invalid sort for base expression: {base.sort()}")
        idx = ctx.term(expr.index)
        if not z3.is_bv(idx):
            raise ShapeMismatchError(f"Invalid sort for index expression: {idx.sort()}")
        return SyntheticOp.ARRAY_SUB.apply(ctx.types.sort_of(expr.type), base, idx)

    def translate_member(self, expr: MemberExpr, ctx: "TranslationContext") -> z3.ExprRef:
        logger.debug("VisitMemberExpr: %s", expr.member.name)
        mem = ctx.symbol(expr.member)()
        base = ctx.term(expr.base)
        return SyntheticOp.MEMBER.apply(mem.sort(), base, mem)

    def translate_paren(self, expr: ParenExpr, ctx: "TranslationContext") -> z3.ExprRef:
        """Parens are kept only around uninterpreted applications."""
        sub = ctx.term(expr.sub)
        if sub.decl().kind() == z3.Z3_OP_UNINTERPRETED:
            return SyntheticOp.PAREN.apply(sub.sort(), sub)
        return sub

    def _require_bv(self, term: z3.ExprRef, op):
        if not z3.is_bv(term):
            raise ShapeMismatchError(
                f"Operator '{op.value}' needs a bitvector operand, got {term.sort()}")

    def _require_same_sort(self, lhs: z3.ExprRef, rhs: z3.ExprRef, op):
        if not lhs.sort().eq(rhs.sort()):
            raise ShapeMismatchError(
                f"Operator '{op.value}' operand sorts differ: {lhs.sort()} vs {rhs.sort()}")
