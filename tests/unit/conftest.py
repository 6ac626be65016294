"""
Pytest configuration and fixtures for cdecomp-smt tests.
"""
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from cdecomp.smt import TranslationContext
from cdecomp.smt.c_ast import RecordDecl, VarDecl, builders


@pytest.fixture
def ctx():
    """Fresh translation context with default (LP64) types."""
    return TranslationContext()


@pytest.fixture
def ast(ctx):
    """AST context owned by `ctx`."""
    return ctx.ast


@pytest.fixture
def x(ast):
    """Reference to `int x`."""
    return builders.decl_ref(VarDecl("x", ast.int_ty))


@pytest.fixture
def y(ast):
    """Reference to `int y`."""
    return builders.decl_ref(VarDecl("y", ast.int_ty))


@pytest.fixture
def point(ast):
    """`struct point { int px; int py; }`"""
    rec = RecordDecl("point")
    rec.add_field("px", ast.int_ty)
    rec.add_field("py", ast.int_ty)
    return rec
