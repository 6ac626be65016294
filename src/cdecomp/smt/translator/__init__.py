"""
Translation between C expressions and Z3 terms.
"""

from .type_translator import TypeTranslator
from .registry import IdentityRegistry
from .synthetic import SyntheticOp
from .expr_translator import ExprToZ3Translator, decl_symbol_name
from .z3_translator import Z3ToExprTranslator
from .translation_context import TranslationContext

__all__ = [
    "TypeTranslator",
    "IdentityRegistry",
    "SyntheticOp",
    "ExprToZ3Translator",
    "decl_symbol_name",
    "Z3ToExprTranslator",
    "TranslationContext",
]
