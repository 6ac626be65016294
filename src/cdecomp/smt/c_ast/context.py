"""
AST context: standard C types for a target and type queries over them.
"""
from dataclasses import dataclass
from typing import Optional

from ..errors import ConstructKind, UnsupportedConstructError
from .types import (
    ArrayType, BoolType, CType, FloatType, IntType, PointerType, VoidType
)


@dataclass(frozen=True)
class TargetInfo:
    """Platform data model. Defaults describe LP64."""
    char_signed: bool = True
    short_width: int = 16
    int_width: int = 32
    long_width: int = 64
    long_long_width: int = 64
    pointer_width: int = 64
    long_double_width: int = 128


class ASTContext:
    """Owns the standard C types of one translation unit.

    Provides the width-to-type rules used when rebuilding literals and
    casts from SMT terms.
    """

    def __init__(self, target: Optional[TargetInfo] = None):
        self.target = target or TargetInfo()
        t = self.target

        self.void_ty = VoidType()
        self.bool_ty = BoolType()

        self.char_ty = IntType("char", 8, t.char_signed, 1, char=True)
        self.signed_char_ty = IntType("signed char", 8, True, 1, char=True)
        self.unsigned_char_ty = IntType("unsigned char", 8, False, 1, char=True)
        self.short_ty = IntType("short", t.short_width, True, 2)
        self.unsigned_short_ty = IntType("unsigned short", t.short_width, False, 2)
        self.int_ty = IntType("int", t.int_width, True, 3)
        self.unsigned_int_ty = IntType("unsigned int", t.int_width, False, 3)
        self.long_ty = IntType("long", t.long_width, True, 4)
        self.unsigned_long_ty = IntType("unsigned long", t.long_width, False, 4)
        self.long_long_ty = IntType("long long", t.long_long_width, True, 5)
        self.unsigned_long_long_ty = IntType(
            "unsigned long long", t.long_long_width, False, 5)
        self.int128_ty = IntType("__int128", 128, True, 6)
        self.unsigned_int128_ty = IntType("unsigned __int128", 128, False, 6)

        self.half_ty = FloatType("_Float16", 16)
        self.float_ty = FloatType("float", 32)
        self.double_ty = FloatType("double", 64)
        self.long_double_ty = FloatType("long double", t.long_double_width)

        # Smallest rank first, so the first match for a width wins.
        self._int_types = [
            (self.signed_char_ty, self.unsigned_char_ty),
            (self.short_ty, self.unsigned_short_ty),
            (self.int_ty, self.unsigned_int_ty),
            (self.long_ty, self.unsigned_long_ty),
            (self.long_long_ty, self.unsigned_long_long_ty),
            (self.int128_ty, self.unsigned_int128_ty),
        ]

    def int_type_for_bitwidth(self, width: int, signed: bool) -> CType:
        """Get the integer type with exactly `width` bits.

        Non-standard widths yield a `_BitInt(width)` type.
        """
        if width <= 0:
            raise UnsupportedConstructError(ConstructKind.TYPE, f"int{width}")
        for s_ty, u_ty in self._int_types:
            if s_ty.width == width:
                return s_ty if signed else u_ty
        name = f"_BitInt({width})" if signed else f"unsigned _BitInt({width})"
        return IntType(name, width, signed, 0)

    def real_type_for_bitwidth(self, width: int) -> CType:
        for ty in (self.half_ty, self.float_ty, self.double_ty, self.long_double_ty):
            if ty.width == width:
                return ty
        raise UnsupportedConstructError(ConstructKind.TYPE, f"float{width}")

    def integer_type_order(self, lhs: CType, rhs: CType) -> int:
        """Compare integer conversion rank: -1, 0 or 1."""
        lkey = (lhs.width, lhs.rank)
        rkey = (rhs.width, rhs.rank)
        if lkey < rkey:
            return -1
        return 1 if lkey > rkey else 0

    def pointer_type(self, pointee: CType) -> PointerType:
        return PointerType(pointee, self.target.pointer_width)

    def array_type(self, element: CType, size: int) -> ArrayType:
        return ArrayType(element, size)

    def array_decayed_type(self, array: CType) -> PointerType:
        if not array.is_array():
            raise TypeError(f"Expected array type, got {array}")
        return self.pointer_type(array.element)
