"""
Type translator between C types and Z3 sorts.
"""
import logging
from typing import Any, Dict, List
import z3

from ..c_ast import ASTContext, CType, Expr, builders
from ..config import TranslationOptions
from ..errors import ConstructKind, ShapeMismatchError, UnsupportedConstructError

logger = logging.getLogger(__name__)


class TypeTranslator:
    """Translates C types to Z3 sorts, and Z3 numerals back to C literals.

    Mapping:
        _Bool -> Bool
        struct S -> DeclareSort('S')
        half/float/double/long double -> Float16/Float32/Float64/Float128
        other scalars (ints, pointers, arrays) -> BitVec(width)
    """

    def __init__(self, ast_ctx: ASTContext, z3_ctx: z3.Context,
                 options: TranslationOptions = None):
        self.ast_ctx = ast_ctx
        self.z3_ctx = z3_ctx
        self.options = options or TranslationOptions()
        # Record decls seen per name, in first-use order
        self._records: Dict[str, List[Any]] = {}
        self._float_sorts = {
            16: z3.Float16,
            32: z3.Float32,
            64: z3.Float64,
            128: z3.Float128,
        }

    def sort_of(self, type: CType) -> z3.SortRef:
        """Get the Z3 sort for a C type.

        Args:
            type: C type

        Returns:
            Z3 sort

        Raises:
            UnsupportedConstructError: For floating widths other than
                16/32/64/128
            ShapeMismatchError: For types without a positive width (void,
                functions)
        """
        if type.is_boolean():
            return z3.BoolSort(self.z3_ctx)

        if type.is_structure():
            return z3.DeclareSort(self.record_sort_name(type.decl), self.z3_ctx)

        width = type.width
        if type.is_real_floating():
            mk_sort = self._float_sorts.get(width)
            if mk_sort is None:
                raise UnsupportedConstructError(ConstructKind.SORT, f"{width}-bit floating point")
            return mk_sort(self.z3_ctx)

        if width <= 0:
            raise ShapeMismatchError(f"Type {type} has no bit width")

        return z3.BitVecSort(width, self.z3_ctx)

    def record_sort_name(self, decl: Any) -> str:
        """Name of the uninterpreted sort standing for a record.

        The first record called `S` owns the name `S`. Later, distinct
        records with the same name get `S!1`, `S!2`, ... unless
        `unique_record_sorts` is off, in which case they all share `S`.
        """
        if not self.options.unique_record_sorts:
            return decl.name

        seen = self._records.setdefault(decl.name, [])
        for i, other in enumerate(seen):
            if other is decl:
                return decl.name if i == 0 else f"{decl.name}!{i}"
        seen.append(decl)
        idx = len(seen) - 1
        if idx:
            logger.debug("Record name %s reused; sort %s!%d", decl.name, decl.name, idx)
        return decl.name if idx == 0 else f"{decl.name}!{idx}"

    def sort_size(self, sort: z3.SortRef) -> int:
        """Get bit width of a sort (0 for uninterpreted sorts)."""
        kind = sort.kind()
        if kind == z3.Z3_BOOL_SORT:
            return 1
        if kind == z3.Z3_BV_SORT:
            return sort.size()
        if kind == z3.Z3_FLOATING_POINT_SORT:
            return sort.ebits() + sort.sbits()
        if kind == z3.Z3_UNINTERPRETED_SORT:
            return 0
        raise UnsupportedConstructError(ConstructKind.SORT, sort)

    def literal_of(self, term: z3.ExprRef) -> Expr:
        """Build a C literal from a Z3 numeral.

        Booleans become 0/1 of type unsigned int, bitvectors become integer
        (or, for character types, character) literals of the unsigned type
        of the same width, and floating-point numerals become floating
        literals carrying the same IEEE bit pattern.

        Args:
            term: Z3 boolean, bitvector or floating-point value

        Returns:
            Literal expression
        """
        logger.debug("Creating literal for %s", term)
        sort = term.sort()
        kind = sort.kind()

        if kind == z3.Z3_BOOL_SORT:
            value = 1 if z3.is_true(term) else 0
            return builders.integer_literal(value, self.ast_ctx.unsigned_int_ty)

        if kind == z3.Z3_BV_SORT:
            ty = self.ast_ctx.int_type_for_bitwidth(self.sort_size(sort), False)
            value = int(term.as_string())
            if ty.is_char():
                return builders.character_literal(value, ty)
            return builders.integer_literal(value, ty)

        if kind == z3.Z3_FLOATING_POINT_SORT:
            ty = self.ast_ctx.real_type_for_bitwidth(self.sort_size(sort))
            bits = z3.simplify(z3.fpToIEEEBV(term))
            if not z3.is_bv_value(bits):
                raise ShapeMismatchError(f"Floating-point term is not a value: {term}")
            return builders.floating_literal_from_bits(bits.as_long(), ty)

        raise UnsupportedConstructError(ConstructKind.SORT, sort)

    def value_of(self, literal: Expr, sort: z3.SortRef) -> z3.ExprRef:
        """Build a Z3 numeral of `sort` from an integer or floating literal."""
        kind = sort.kind()
        if kind == z3.Z3_BOOL_SORT:
            return z3.BoolVal(literal.value != 0, self.z3_ctx)
        if kind == z3.Z3_BV_SORT:
            return z3.BitVecVal(literal.value, sort)
        if kind == z3.Z3_FLOATING_POINT_SORT:
            width = self.sort_size(sort)
            ieee = z3.BitVecVal(literal.bits, width, self.z3_ctx)
            return z3.simplify(z3.fpBVToFP(ieee, sort, self.z3_ctx))
        raise UnsupportedConstructError(ConstructKind.SORT, sort)

    def zero_of(self, sort: z3.SortRef) -> z3.ExprRef:
        """Zero value of a bitvector or floating-point sort."""
        kind = sort.kind()
        if kind == z3.Z3_BV_SORT:
            return z3.BitVecVal(0, sort)
        if kind == z3.Z3_FLOATING_POINT_SORT:
            return z3.FPVal(0.0, None, sort, self.z3_ctx)
        raise ShapeMismatchError(f"No zero value for sort {sort}")
