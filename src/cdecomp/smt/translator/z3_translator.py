"""
Z3 term to C expression translator.

Decoding is driven by the shape of the term alone: the number of
arguments and the operator kind of its function symbol. Arguments are
decoded first, through the context, so shared sub-terms are rebuilt once.
"""

import logging
from typing import TYPE_CHECKING, Optional
import z3

from ..c_ast import BinaryOp, CastKind, Expr, FieldDecl, UnaryOp, builders
from ..errors import ConstructKind, ShapeMismatchError, UnsupportedConstructError
from .synthetic import SyntheticOp

if TYPE_CHECKING:
    from .translation_context import TranslationContext

logger = logging.getLogger(__name__)

_LITERAL_KINDS = frozenset([
    z3.Z3_OP_TRUE,
    z3.Z3_OP_FALSE,
    z3.Z3_OP_ANUM,
    z3.Z3_OP_BNUM,
    z3.Z3_OP_FPA_NUM,
    z3.Z3_OP_FPA_PLUS_ZERO,
    z3.Z3_OP_FPA_MINUS_ZERO,
    z3.Z3_OP_FPA_PLUS_INF,
    z3.Z3_OP_FPA_MINUS_INF,
    z3.Z3_OP_FPA_NAN,
])

_RESIZE_KINDS = frozenset([z3.Z3_OP_EXTRACT, z3.Z3_OP_ZERO_EXT, z3.Z3_OP_SIGN_EXT])

# Bitvector arithmetic whose C result type follows the usual conversions
_ARITH_OPS = {
    z3.Z3_OP_BADD: BinaryOp.ADD,
    z3.Z3_OP_BSUB: BinaryOp.SUB,
    z3.Z3_OP_BMUL: BinaryOp.MUL,
    z3.Z3_OP_BSDIV: BinaryOp.DIV,
    z3.Z3_OP_BSDIV_I: BinaryOp.DIV,
    z3.Z3_OP_BUDIV: BinaryOp.DIV,
    z3.Z3_OP_BUDIV_I: BinaryOp.DIV,
    z3.Z3_OP_BSREM: BinaryOp.REM,
    z3.Z3_OP_BSREM_I: BinaryOp.REM,
    z3.Z3_OP_BUREM: BinaryOp.REM,
    z3.Z3_OP_BUREM_I: BinaryOp.REM,
    z3.Z3_OP_BAND: BinaryOp.AND,
    z3.Z3_OP_BOR: BinaryOp.OR,
    z3.Z3_OP_BXOR: BinaryOp.XOR,
}

# Shifts take the type of their left operand
_SHIFT_OPS = {
    z3.Z3_OP_BSHL: BinaryOp.SHL,
    z3.Z3_OP_BASHR: BinaryOp.SHR,
    z3.Z3_OP_BLSHR: BinaryOp.SHR,
}

_COMPARE_OPS = {
    z3.Z3_OP_EQ: BinaryOp.EQ,
    z3.Z3_OP_FPA_EQ: BinaryOp.EQ,
    z3.Z3_OP_DISTINCT: BinaryOp.NE,
    z3.Z3_OP_SLT: BinaryOp.LT,
    z3.Z3_OP_ULT: BinaryOp.LT,
    z3.Z3_OP_SLEQ: BinaryOp.LE,
    z3.Z3_OP_ULEQ: BinaryOp.LE,
    z3.Z3_OP_SGT: BinaryOp.GT,
    z3.Z3_OP_UGT: BinaryOp.GT,
    z3.Z3_OP_SGEQ: BinaryOp.GE,
    z3.Z3_OP_UGEQ: BinaryOp.GE,
}

_FOLD_OPS = {
    z3.Z3_OP_AND: BinaryOp.LAND,
    z3.Z3_OP_OR: BinaryOp.LOR,
}


def _is_zero(term: z3.ExprRef) -> bool:
    return z3.is_bv_value(term) and term.as_long() == 0


class Z3ToExprTranslator:
    """Translates Z3 terms back to C expressions."""

    def translate(self, term: z3.ExprRef, ctx: "TranslationContext") -> Optional[Expr]:
        """Translate a term to an expression.

        Args:
            term: Z3 term
            ctx: Translation context

        Returns:
            Expression, or None for auxiliary constants whose meaning is
            handled by the parent application
        """
        if z3.is_quantifier(term):
            raise UnsupportedConstructError(ConstructKind.TERM, "quantifier")
        if z3.is_var(term):
            raise UnsupportedConstructError(ConstructKind.TERM, "free variable")
        if not z3.is_app(term):
            raise UnsupportedConstructError(ConstructKind.TERM, term)

        for arg in term.children():
            ctx.expression(arg)

        nargs = term.num_args()
        if nargs == 0:
            return self.translate_constant(term, ctx)
        elif nargs == 1:
            return self.translate_unary_app(term, ctx)
        return self.translate_binary_app(term, ctx)

    def translate_constant(self, term: z3.ExprRef, ctx: "TranslationContext") -> Optional[Expr]:
        """Literals and declaration references."""
        logger.debug("VisitConstant: %s", term)
        decl = term.decl()
        kind = decl.kind()

        if kind in _LITERAL_KINDS:
            return ctx.types.literal_of(term)
        elif kind == z3.Z3_OP_INTERNAL:
            return None
        elif kind == z3.Z3_OP_UNINTERPRETED:
            if ctx.registry.is_type_tag(decl):
                return None
            return builders.decl_ref(ctx.declaration(decl))
        raise UnsupportedConstructError(ConstructKind.OPERATOR, decl.name())

    def translate_unary_app(self, term: z3.ExprRef, ctx: "TranslationContext") -> Expr:
        logger.debug("VisitUnaryApp: %s", term)
        sub = self._operand(term, 0, ctx)
        decl = term.decl()
        kind = decl.kind()

        if kind == z3.Z3_OP_NOT:
            return builders.not_expr(ctx.ast, sub)
        elif kind == z3.Z3_OP_BNEG:
            return builders.unary(UnaryOp.MINUS, sub, sub.type)
        elif kind == z3.Z3_OP_BNOT:
            return builders.unary(UnaryOp.NOT, sub, sub.type)
        elif kind in _RESIZE_KINDS:
            return self._translate_resize(term, sub, ctx)
        elif kind == z3.Z3_OP_UNINTERPRETED:
            return self._translate_synthetic_unary(term, sub, ctx)
        raise UnsupportedConstructError(ConstructKind.OPERATOR, decl.name())

    def _translate_resize(self, term: z3.ExprRef, sub: Expr, ctx: "TranslationContext") -> Expr:
        """Extract/ZeroExt/SignExt (and zero padding) become an integral cast
        to the result width."""
        t_sub = sub.type
        if not t_sub.is_integer():
            raise ShapeMismatchError(f"Cast operand is not an integer: {t_sub}")
        if term.decl().kind() == z3.Z3_OP_EXTRACT:
            _, low = term.decl().params()
            if low != 0:
                raise UnsupportedConstructError(
                    ConstructKind.OPERATOR, f"extract with low bit {low}")

        width = ctx.types.sort_size(term.sort())
        t_op = ctx.registry.get_cast_type(term)
        if t_op is None or t_op.width != width:
            t_op = ctx.ast.int_type_for_bitwidth(width, t_sub.is_signed_integer())
        return builders.cstyle_cast(t_op, CastKind.INTEGRAL_CAST, sub)

    def _translate_synthetic_unary(self, term: z3.ExprRef, sub: Expr,
                                   ctx: "TranslationContext") -> Expr:
        op = SyntheticOp.from_decl(term.decl())
        t_sub = sub.type

        if op == SyntheticOp.ADDR_OF:
            return builders.unary(UnaryOp.ADDR_OF, sub, ctx.ast.pointer_type(t_sub))
        elif op == SyntheticOp.DEREF:
            if not t_sub.is_pointer():
                raise ShapeMismatchError(f"Deref operand type is not a pointer: {t_sub}")
            return builders.unary(UnaryOp.DEREF, sub, t_sub.pointee)
        elif op == SyntheticOp.PAREN:
            return builders.paren(sub)
        elif op == SyntheticOp.PTR_DECAY:
            if not t_sub.is_array():
                raise ShapeMismatchError(f"PtrDecay operand type is not an array: {t_sub}")
            t_op = ctx.ast.array_decayed_type(t_sub)
            return builders.implicit_cast(t_op, CastKind.ARRAY_TO_POINTER_DECAY, sub)
        elif op == SyntheticOp.PTR_TO_INT:
            width = ctx.types.sort_size(term.sort())
            t_op = ctx.ast.int_type_for_bitwidth(width, False)
            return builders.cstyle_cast(t_op, CastKind.POINTER_TO_INTEGRAL, sub)
        raise UnsupportedConstructError(ConstructKind.SYNTHETIC_FUNCTION, op.value)

    def translate_binary_app(self, term: z3.ExprRef, ctx: "TranslationContext") -> Expr:
        logger.debug("VisitBinaryApp: %s", term)
        decl = term.decl()
        kind = decl.kind()
        nargs = term.num_args()

        if kind in _FOLD_OPS:
            # And/Or are n-ary in Z3; fold left into nested && / ||
            c_op = self._operand(term, 0, ctx)
            for i in range(1, nargs):
                rhs = self._operand(term, i, ctx)
                c_op = builders.binary(_FOLD_OPS[kind], c_op, rhs, ctx.ast.bool_ty)
            return c_op

        if nargs != 2:
            raise UnsupportedConstructError(ConstructKind.OPERATOR, f"{decl.name()}/{nargs}")

        if kind == z3.Z3_OP_UNINTERPRETED:
            return self._translate_synthetic_binary(term, ctx)

        lhs = self._operand(term, 0, ctx)
        rhs = self._operand(term, 1, ctx)

        if kind in _COMPARE_OPS:
            return builders.binary(_COMPARE_OPS[kind], lhs, rhs, ctx.ast.bool_ty)
        elif kind in _ARITH_OPS:
            return builders.binary(_ARITH_OPS[kind], lhs, rhs, self._int_result_type(lhs, rhs, ctx))
        elif kind in _SHIFT_OPS:
            return builders.binary(_SHIFT_OPS[kind], lhs, rhs, lhs.type)
        elif kind == z3.Z3_OP_CONCAT and _is_zero(term.arg(0)):
            # z3.simplify rewrites ZeroExt as Concat(0, x)
            return self._translate_resize(term, rhs, ctx)
        raise UnsupportedConstructError(ConstructKind.OPERATOR, decl.name())

    def _translate_synthetic_binary(self, term: z3.ExprRef, ctx: "TranslationContext") -> Expr:
        op = SyntheticOp.from_decl(term.decl())

        if op == SyntheticOp.ARRAY_SUB:
            base = self._operand(term, 0, ctx)
            idx = self._operand(term, 1, ctx)
            if not base.type.is_pointer():
                raise ShapeMismatchError(f"Subscript base is not a pointer: {base.type}")
            return builders.array_subscript(base, idx, base.type.pointee)
        elif op == SyntheticOp.MEMBER:
            base = self._operand(term, 0, ctx)
            field = ctx.declaration(term.arg(1).decl())
            if not isinstance(field, FieldDecl):
                raise ShapeMismatchError(f"Member symbol is not a field: {term.arg(1)}")
            return builders.member(base, field, is_arrow=base.type.is_pointer())
        elif op == SyntheticOp.INT_TO_PTR:
            t_dst = ctx.registry.get_tag_type(term.arg(0).decl())
            sub = self._operand(term, 1, ctx)
            return builders.cstyle_cast(t_dst, CastKind.INTEGRAL_TO_POINTER, sub)
        raise UnsupportedConstructError(ConstructKind.SYNTHETIC_FUNCTION, op.value)

    def _int_result_type(self, lhs: Expr, rhs: Expr, ctx: "TranslationContext"):
        """Result type of integer arithmetic: the operand of higher rank.

        Pointer arithmetic keeps the pointer type.
        """
        lht, rht = lhs.type, rhs.type
        if lht.is_pointer():
            return lht
        if rht.is_pointer():
            return rht
        if not (lht.is_integer() and rht.is_integer()):
            raise ShapeMismatchError(f"Arithmetic on non-integer types: {lht}, {rht}")
        return rht if ctx.ast.integer_type_order(lht, rht) < 0 else lht

    def _operand(self, term: z3.ExprRef, i: int, ctx: "TranslationContext") -> Expr:
        expr = ctx.registry.get_expr(term.arg(i))
        if expr is None:
            raise ShapeMismatchError(f"Argument {i} of {term.decl().name()} has no expression")
        return expr
