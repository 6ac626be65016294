"""
Tests for the identity registry.
"""
import pytest
import z3

from cdecomp.smt import DuplicateMappingError, MissingMappingError
from cdecomp.smt.c_ast import VarDecl, builders
from cdecomp.smt.translator import IdentityRegistry


@pytest.fixture
def registry():
    return IdentityRegistry()


def test_expr_to_term(registry, x, ctx):
    """Test the expression -> term table."""
    term = z3.BitVec("x", 32, ctx.z3_ctx)

    assert not registry.has_term(x)
    registry.insert_term(x, term)

    assert registry.has_term(x)
    assert registry.get_term(x).eq(term)
    with pytest.raises(DuplicateMappingError):
        registry.insert_term(x, term)


def test_expr_keys_are_identities(registry, ast, ctx):
    """Test that equal-looking expressions are distinct keys."""
    a = builders.integer_literal(1, ast.int_ty)
    b = builders.integer_literal(1, ast.int_ty)
    registry.insert_term(a, z3.BitVecVal(1, 32, ctx.z3_ctx))

    assert not registry.has_term(b)
    with pytest.raises(MissingMappingError):
        registry.get_term(b)


def test_decl_to_symbol(registry, ast, ctx):
    """Test the declaration -> symbol table."""
    decl = VarDecl("v", ast.int_ty)
    symbol = z3.BitVec("v", 32, ctx.z3_ctx).decl()

    registry.insert_symbol(decl, symbol)

    assert registry.get_symbol(decl).eq(symbol)
    with pytest.raises(DuplicateMappingError):
        registry.insert_symbol(decl, symbol)
    with pytest.raises(MissingMappingError):
        registry.get_symbol(VarDecl("v", ast.int_ty))


def test_term_to_expr(registry, x, ctx):
    """Test that structurally identical terms share one entry."""
    registry.insert_expr(z3.BitVec("x", 32, ctx.z3_ctx) + 1, x)

    again = z3.BitVec("x", 32, ctx.z3_ctx) + 1
    assert registry.has_expr(again)
    assert registry.get_expr(again) is x
    with pytest.raises(DuplicateMappingError):
        registry.insert_expr(again, x)
    with pytest.raises(MissingMappingError):
        registry.get_expr(z3.BitVec("x", 32, ctx.z3_ctx) + 2)


def test_term_to_none(registry, ctx):
    """Test that auxiliary terms map to None."""
    aux = z3.Const("t", z3.DeclareSort("T", ctx.z3_ctx))
    registry.insert_expr(aux, None)

    assert registry.has_expr(aux)
    assert registry.get_expr(aux) is None


def test_symbol_to_decl(registry, ast, ctx):
    """Test that symbols are keyed by id, not by name."""
    d1 = VarDecl("v", ast.int_ty)
    s1 = z3.BitVec("v", 32, ctx.z3_ctx).decl()
    s2 = z3.BitVec("v", 16, ctx.z3_ctx).decl()

    registry.insert_decl(s1, d1)

    assert registry.get_decl(s1) is d1
    assert not registry.has_decl(s2)
    with pytest.raises(DuplicateMappingError):
        registry.insert_decl(s1, d1)
    with pytest.raises(MissingMappingError):
        registry.get_decl(s2)


def test_type_tags(registry, ast, ctx):
    """Test the type tag side-table."""
    ptr = ast.pointer_type(ast.int_ty)
    tag = z3.Const("int *!0", z3.DeclareSort("!TypeTag", ctx.z3_ctx))

    assert registry.lookup_type_tag(ptr) is None
    registry.insert_type_tag(tag, ptr)

    assert registry.lookup_type_tag(ast.pointer_type(ast.int_ty)).eq(tag)
    assert registry.is_type_tag(tag.decl())
    assert registry.get_tag_type(tag.decl()) == ptr
    with pytest.raises(DuplicateMappingError):
        registry.insert_type_tag(tag, ptr)
    with pytest.raises(MissingMappingError):
        registry.get_tag_type(z3.BitVec("v", 8, ctx.z3_ctx).decl())


def test_cast_types_conflict(registry, ast, ctx):
    """Test that disagreeing cast types leave the term without a type."""
    term = z3.Extract(7, 0, z3.BitVec("x", 32, ctx.z3_ctx))

    assert registry.get_cast_type(term) is None
    registry.record_cast_type(term, ast.unsigned_char_ty)
    registry.record_cast_type(term, ast.signed_char_ty)

    assert registry.get_cast_type(term) is None

    registry.record_cast_type(term, ast.unsigned_char_ty)
    assert registry.get_cast_type(term) is None


def test_cast_types_repeated(registry, ast, ctx):
    """Test that recording the same type twice keeps it."""
    term = z3.ZeroExt(16, z3.BitVec("u", 16, ctx.z3_ctx))

    registry.record_cast_type(term, ast.unsigned_int_ty)
    registry.record_cast_type(term, ast.unsigned_int_ty)

    assert registry.get_cast_type(term) == ast.unsigned_int_ty


def test_counts(registry, x, ast, ctx):
    """Test entry counts per table."""
    term = z3.BitVec("x", 32, ctx.z3_ctx)
    registry.insert_term(x, term)
    registry.insert_expr(term, x)
    registry.insert_decl(term.decl(), x.decl)

    counts = registry.counts()
    assert counts["expr->term"] == 1
    assert counts["decl->symbol"] == 0
    assert counts["term->expr"] == 1
    assert counts["symbol->decl"] == 1
    assert counts["type tags"] == 0
