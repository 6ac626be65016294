"""
Error types raised by the C <-> SMT translators.

All errors abort the current translation request. A driver that wants to
skip an expression and carry on catches `TranslationError`.
"""
from enum import Enum
from typing import Any


class ConstructKind(Enum):
    """Category of a construct outside the supported vocabulary."""
    EXPRESSION = "expression"
    DECLARATION = "declaration"
    UNARY_OPERATOR = "unary operator"
    BINARY_OPERATOR = "binary operator"
    CAST_KIND = "cast kind"
    TYPE = "type"
    SORT = "sort"
    TERM = "term"
    OPERATOR = "z3 operator"
    SYNTHETIC_FUNCTION = "uninterpreted function"


class TranslationError(Exception):
    """Base class for translation failures."""


class UnsupportedConstructError(TranslationError):
    """A C or z3 construct that neither translator handles.

    Attributes:
        kind: Category of the construct
        tag: The offending operator, cast kind, sort or node
    """

    def __init__(self, kind: ConstructKind, tag: Any):
        self.kind = kind
        self.tag = tag
        super().__init__(f"Unsupported {kind.value}: {tag}")


class InvariantViolationError(TranslationError):
    """The identity registry was used inconsistently."""

    def __init__(self, table: str, key: Any, message: str):
        self.table = table
        self.key = key
        super().__init__(f"{table}: {message} ({key})")


class DuplicateMappingError(InvariantViolationError):

    def __init__(self, table: str, key: Any):
        super().__init__(table, key, "key is already mapped")


class MissingMappingError(InvariantViolationError):

    def __init__(self, table: str, key: Any):
        super().__init__(table, key, "key has no mapping")


class ShapeMismatchError(TranslationError):
    """An operand has the wrong sort or type for the operation."""
