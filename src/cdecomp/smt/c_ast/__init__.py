"""
Minimal typed C AST consumed and produced by the translators.
"""

from .types import (
    CType, VoidType, BoolType, IntType, FloatType, PointerType, ArrayType,
    RecordType, FunctionType,
)
from .decls import Decl, VarDecl, FieldDecl, RecordDecl, FunctionDecl
from .exprs import (
    Expr, IntegerLiteral, CharacterLiteral, FloatingLiteral, DeclRefExpr,
    UnaryOperator, BinaryOperator, CastExpr, CStyleCastExpr, ImplicitCastExpr,
    MemberExpr, ArraySubscriptExpr, ParenExpr, CallExpr,
    UnaryOp, BinaryOp, CastKind, structurally_equal,
)
from .context import ASTContext, TargetInfo
from . import builders

__all__ = [
    "CType", "VoidType", "BoolType", "IntType", "FloatType", "PointerType",
    "ArrayType", "RecordType", "FunctionType",
    "Decl", "VarDecl", "FieldDecl", "RecordDecl", "FunctionDecl",
    "Expr", "IntegerLiteral", "CharacterLiteral", "FloatingLiteral",
    "DeclRefExpr", "UnaryOperator", "BinaryOperator", "CastExpr",
    "CStyleCastExpr", "ImplicitCastExpr", "MemberExpr", "ArraySubscriptExpr",
    "ParenExpr", "CallExpr", "UnaryOp", "BinaryOp", "CastKind",
    "structurally_equal",
    "ASTContext", "TargetInfo",
    "builders",
]
