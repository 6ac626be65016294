"""
Bidirectional translation between C expressions and Z3 terms.

This package encodes typed C expressions as SMT terms so a solver can
simplify them, and rebuilds equivalent C expressions from the
simplified terms.
"""

import logging

__version__ = "0.1.0"

from .config import TranslationOptions
from .errors import (
    ConstructKind,
    TranslationError,
    UnsupportedConstructError,
    InvariantViolationError,
    DuplicateMappingError,
    MissingMappingError,
    ShapeMismatchError,
)
from .translator import (
    TypeTranslator,
    IdentityRegistry,
    SyntheticOp,
    ExprToZ3Translator,
    Z3ToExprTranslator,
    TranslationContext,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "TranslationOptions",
    "ConstructKind",
    "TranslationError",
    "UnsupportedConstructError",
    "InvariantViolationError",
    "DuplicateMappingError",
    "MissingMappingError",
    "ShapeMismatchError",
    "TypeTranslator",
    "IdentityRegistry",
    "SyntheticOp",
    "ExprToZ3Translator",
    "Z3ToExprTranslator",
    "TranslationContext",
]
