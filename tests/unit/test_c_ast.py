"""
Tests for the C AST model.
"""
import pytest

from cdecomp.smt import UnsupportedConstructError
from cdecomp.smt.c_ast import (
    ASTContext, BinaryOp, CastKind, IntType, RecordDecl, TargetInfo, UnaryOp,
    VarDecl, builders, structurally_equal,
)


def test_int_type_for_bitwidth(ast):
    """Test standard types are preferred, smallest rank first."""
    assert ast.int_type_for_bitwidth(8, False) == ast.unsigned_char_ty
    assert ast.int_type_for_bitwidth(8, True) == ast.signed_char_ty
    assert ast.int_type_for_bitwidth(16, True) == ast.short_ty
    assert ast.int_type_for_bitwidth(32, False) == ast.unsigned_int_ty
    assert ast.int_type_for_bitwidth(64, True) == ast.long_ty
    assert ast.int_type_for_bitwidth(128, False) == ast.unsigned_int128_ty


def test_int_type_for_odd_bitwidth(ast):
    """Test that non-standard widths produce _BitInt types."""
    ty = ast.int_type_for_bitwidth(24, True)
    assert str(ty) == "_BitInt(24)"
    assert ty.width == 24
    assert ty.is_signed_integer()

    with pytest.raises(UnsupportedConstructError):
        ast.int_type_for_bitwidth(0, False)


def test_real_type_for_bitwidth(ast):
    assert ast.real_type_for_bitwidth(32) == ast.float_ty
    assert ast.real_type_for_bitwidth(128) == ast.long_double_ty
    with pytest.raises(UnsupportedConstructError):
        ast.real_type_for_bitwidth(80)


def test_integer_type_order(ast):
    """Test conversion rank comparison."""
    assert ast.integer_type_order(ast.int_ty, ast.long_ty) == -1
    assert ast.integer_type_order(ast.long_long_ty, ast.long_ty) == 1
    assert ast.integer_type_order(ast.int_ty, ast.unsigned_int_ty) == 0


def test_target_char_sign():
    """Test that plain char follows the target."""
    arm = ASTContext(TargetInfo(char_signed=False))
    assert not arm.char_ty.is_signed_integer()
    assert arm.char_ty.is_char()


def test_type_spelling(ast, point):
    """Test C spelling of types."""
    assert str(ast.pointer_type(ast.char_ty)) == "char *"
    assert str(ast.array_type(ast.int_ty, 4)) == "int[4]"
    assert str(point.type) == "struct point"
    assert str(ast.bool_ty) == "_Bool"


def test_types_structural_equality(ast):
    """Test that types compare by structure."""
    assert ast.pointer_type(ast.int_ty) == ast.pointer_type(ast.int_ty)
    assert IntType("int", 32, True, 3) == ast.int_ty
    assert ast.int_ty != ast.unsigned_int_ty


def test_record_types_by_declaration():
    """Test that records with the same name are different types."""
    a = RecordDecl("s")
    b = RecordDecl("s")
    assert a.type == a.type
    assert a.type != b.type


def test_record_fields(ast, point):
    """Test record field lookup and width."""
    px = point.get_field("px")
    assert px.parent is point
    assert point.width == 64
    with pytest.raises(KeyError):
        point.get_field("pz")


def test_literal_truncation(ast):
    """Test that literals hold the fixed-width representation."""
    assert builders.integer_literal(-1, ast.short_ty).value == 0xFFFF
    assert builders.character_literal(0x141, ast.char_ty).value == 0x41


def test_floating_literal_value(ast):
    """Test floating literals keep their IEEE bits."""
    lit = builders.floating_literal(0.1, ast.float_ty)
    assert lit.bits == 0x3DCCCCCD
    assert abs(lit.value - 0.1) < 1e-7

    lit = builders.floating_literal_from_bits(0x3C00, ast.half_ty)
    assert lit.value == 1.0


def test_structurally_equal(ast):
    """Test observational equivalence of expression trees."""
    v = VarDecl("v", ast.int_ty)
    one = builders.integer_literal(1, ast.int_ty)

    a = builders.binary(BinaryOp.ADD, builders.decl_ref(v), one, ast.int_ty)
    b = builders.binary(
        BinaryOp.ADD, builders.decl_ref(v), builders.integer_literal(1, ast.int_ty), ast.int_ty)
    assert a is not b
    assert structurally_equal(a, b)

    c = builders.binary(BinaryOp.SUB, builders.decl_ref(v), one, ast.int_ty)
    assert not structurally_equal(a, c)

    w = VarDecl("v", ast.int_ty)
    d = builders.binary(BinaryOp.ADD, builders.decl_ref(w), one, ast.int_ty)
    assert not structurally_equal(a, d)


def test_structurally_equal_cast_class(ast):
    """Test that implicit and explicit casts are different nodes."""
    v = builders.decl_ref(VarDecl("v", ast.int_ty))
    explicit = builders.cstyle_cast(ast.long_ty, CastKind.INTEGRAL_CAST, v)
    implicit = builders.implicit_cast(ast.long_ty, CastKind.INTEGRAL_CAST, v)
    assert not structurally_equal(explicit, implicit)


def test_children(ast):
    v = builders.decl_ref(VarDecl("v", ast.int_ty))
    neg = builders.unary(UnaryOp.MINUS, v, ast.int_ty)
    assert neg.children() == (v,)
    assert v.children() == ()
