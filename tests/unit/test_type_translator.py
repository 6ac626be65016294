"""
Tests for type translator.
"""
import pytest
import z3

from cdecomp.smt import ShapeMismatchError, TranslationOptions, UnsupportedConstructError
from cdecomp.smt.c_ast import ASTContext, FloatType, RecordDecl, TargetInfo, builders
from cdecomp.smt.translator import TypeTranslator


@pytest.fixture
def types(ast, ctx):
    return TypeTranslator(ast, ctx.z3_ctx)


def test_sort_of_bool(types, ast):
    """Test that _Bool maps to the boolean sort."""
    sort = types.sort_of(ast.bool_ty)

    assert sort.kind() == z3.Z3_BOOL_SORT


def test_sort_of_integers(types, ast):
    """Test that integer types map to bitvectors of their width."""
    assert types.sort_of(ast.char_ty).size() == 8
    assert types.sort_of(ast.short_ty).size() == 16
    assert types.sort_of(ast.int_ty).size() == 32
    assert types.sort_of(ast.unsigned_long_ty).size() == 64
    assert types.sort_of(ast.int128_ty).size() == 128


def test_sort_of_pointer_and_array(types, ast):
    """Test that pointers and arrays are plain bitvectors."""
    assert types.sort_of(ast.pointer_type(ast.char_ty)).size() == 64
    assert types.sort_of(ast.array_type(ast.int_ty, 4)).size() == 128


def test_sort_of_floating(types, ast):
    """Test floating-point sort selection by width."""
    for ty, ebits, sbits in [
        (ast.half_ty, 5, 11),
        (ast.float_ty, 8, 24),
        (ast.double_ty, 11, 53),
        (ast.long_double_ty, 15, 113),
    ]:
        sort = types.sort_of(ty)
        assert sort.kind() == z3.Z3_FLOATING_POINT_SORT
        assert sort.ebits() == ebits
        assert sort.sbits() == sbits


def test_sort_of_unsupported_floating(types):
    """Test that an 80-bit float has no sort."""
    with pytest.raises(UnsupportedConstructError):
        types.sort_of(FloatType("__float80", 80))


def test_sort_of_void(types, ast):
    """Test that a type without width is rejected."""
    with pytest.raises(ShapeMismatchError):
        types.sort_of(ast.void_ty)


def test_sort_of_deterministic(types, ast):
    """Test that equal types map to the same sort."""
    a = types.sort_of(ast.pointer_type(ast.int_ty))
    b = types.sort_of(ast.pointer_type(ast.int_ty))
    assert a.eq(b)
    assert types.sort_of(ast.int_ty).eq(types.sort_of(ast.unsigned_int_ty))


def test_record_sorts_unique(types, ast):
    """Test that same-named records get distinct uninterpreted sorts."""
    first = RecordDecl("node")
    second = RecordDecl("node")

    s1 = types.sort_of(first.type)
    s2 = types.sort_of(second.type)

    assert s1.kind() == z3.Z3_UNINTERPRETED_SORT
    assert s1.name() == "node"
    assert s2.name() == "node!1"
    assert types.sort_of(first.type).eq(s1)


def test_record_sorts_shared(ast, ctx):
    """Test that same-named records alias one sort when disambiguation is off."""
    types = TypeTranslator(ast, ctx.z3_ctx, TranslationOptions(unique_record_sorts=False))

    s1 = types.sort_of(RecordDecl("node").type)
    s2 = types.sort_of(RecordDecl("node").type)

    assert s1.eq(s2)


def test_sort_size(types, ctx):
    """Test bit widths of sorts."""
    assert types.sort_size(z3.BoolSort(ctx.z3_ctx)) == 1
    assert types.sort_size(z3.BitVecSort(12, ctx.z3_ctx)) == 12
    assert types.sort_size(z3.Float32(ctx.z3_ctx)) == 32
    assert types.sort_size(z3.DeclareSort("S", ctx.z3_ctx)) == 0
    with pytest.raises(UnsupportedConstructError):
        types.sort_size(z3.IntSort(ctx.z3_ctx))


def test_literal_of_bool(types, ast, ctx):
    """Test that booleans decode to unsigned int 0/1."""
    lit = types.literal_of(z3.BoolVal(True, ctx.z3_ctx))
    assert lit.value == 1
    assert lit.type == ast.unsigned_int_ty

    lit = types.literal_of(z3.BoolVal(False, ctx.z3_ctx))
    assert lit.value == 0


def test_literal_of_bitvector(types, ast, ctx):
    """Test that bitvector numerals decode to the unsigned type of their width."""
    lit = types.literal_of(z3.BitVecVal(-1, 32, ctx.z3_ctx))
    assert lit.value == 0xFFFFFFFF
    assert lit.type == ast.unsigned_int_ty

    lit = types.literal_of(z3.BitVecVal(7, 64, ctx.z3_ctx))
    assert lit.type == ast.unsigned_long_ty


def test_literal_of_char(types, ast, ctx):
    """Test that 8-bit numerals decode to character literals."""
    lit = types.literal_of(z3.BitVecVal(65, 8, ctx.z3_ctx))
    assert type(lit).__name__ == "CharacterLiteral"
    assert lit.value == 65
    assert lit.type == ast.unsigned_char_ty


def test_literal_of_odd_width(types, ctx):
    """Test that non-standard widths decode to _BitInt types."""
    lit = types.literal_of(z3.BitVecVal(3, 12, ctx.z3_ctx))
    assert str(lit.type) == "unsigned _BitInt(12)"
    assert lit.value == 3


def test_literal_of_floating(types, ast, ctx):
    """Test that floating-point numerals keep their IEEE value."""
    lit = types.literal_of(z3.FPVal(2.5, None, z3.Float64(ctx.z3_ctx), ctx.z3_ctx))
    assert lit.type == ast.double_ty
    assert lit.value == 2.5

    lit = types.literal_of(z3.FPVal(-0.75, None, z3.Float32(ctx.z3_ctx), ctx.z3_ctx))
    assert lit.type == ast.float_ty
    assert lit.value == -0.75


def test_value_of_floating(types, ast):
    """Test that a floating literal becomes the matching numeral."""
    lit = builders.floating_literal(1.5, ast.float_ty)
    val = types.value_of(lit, types.sort_of(ast.float_ty))

    expected = z3.FPVal(1.5, None, z3.Float32(val.ctx), val.ctx)
    assert z3.is_true(z3.simplify(val == expected))


def test_literal_of_unsupported_sort(types, ctx):
    """Test that integer (non-bitvector) numerals are rejected."""
    with pytest.raises(UnsupportedConstructError):
        types.literal_of(z3.IntVal(3, ctx.z3_ctx))


def test_target_widths(ctx):
    """Test that the target data model drives sort widths."""
    ilp32 = ASTContext(TargetInfo(long_width=32, pointer_width=32))
    types = TypeTranslator(ilp32, ctx.z3_ctx)

    assert types.sort_of(ilp32.long_ty).size() == 32
    assert types.sort_of(ilp32.pointer_type(ilp32.int_ty)).size() == 32
