"""
Translation context for C expression <-> Z3 term translation.

Owns the pair of contexts (C AST and Z3), the identity registry and the
translators, and exposes the memoized get-or-create operations through
which the translators resolve children.
"""

from dataclasses import dataclass, field as dc_field
import logging
from typing import Optional
import z3

from ..c_ast import ASTContext, Decl, Expr
from ..config import TranslationOptions
from ..errors import ShapeMismatchError
from .expr_translator import ExprToZ3Translator
from .registry import IdentityRegistry
from .type_translator import TypeTranslator
from .z3_translator import Z3ToExprTranslator

logger = logging.getLogger(__name__)


@dataclass
class TranslationContext:
    """Context for expression and term translation.

    Attributes:
        ast: C AST context providing standard types
        options: Translation options
        z3_ctx: Z3 context all terms and sorts are created in
        registry: Identity tables, scoped to this context
    """

    ast: ASTContext = dc_field(default_factory=ASTContext)
    options: TranslationOptions = dc_field(default_factory=TranslationOptions)
    z3_ctx: z3.Context = dc_field(default_factory=z3.Context)
    registry: IdentityRegistry = dc_field(default_factory=IdentityRegistry)

    def __post_init__(self):
        self.types = TypeTranslator(self.ast, self.z3_ctx, self.options)
        self.forward = ExprToZ3Translator()
        self.reverse = Z3ToExprTranslator()

    def term(self, expr: Expr) -> z3.ExprRef:
        """Get or create the Z3 term for an expression.

        Args:
            expr: C expression

        Returns:
            Z3 term; the same term on every call for the same node
        """
        if not self.registry.has_term(expr):
            self.registry.insert_term(expr, self.forward.translate(expr, self))
        return self.registry.get_term(expr)

    def symbol(self, decl: Decl) -> z3.FuncDeclRef:
        """Get or create the function symbol for a declaration.

        The reverse mapping (symbol to declaration) is filled in on the way,
        so terms mentioning the symbol can be decoded.
        """
        if not self.registry.has_symbol(decl):
            self.registry.insert_symbol(decl, self.forward.translate_decl(decl, self))
        symbol = self.registry.get_symbol(decl)
        if not self.registry.has_decl(symbol):
            self.registry.insert_decl(symbol, decl)
        return symbol

    def expression(self, term: z3.ExprRef) -> Optional[Expr]:
        """Get or create the expression for a Z3 term.

        Returns None for auxiliary terms (type tags, Z3 internals).
        """
        if not self.registry.has_expr(term):
            self.registry.insert_expr(term, self.reverse.translate(term, self))
        return self.registry.get_expr(term)

    def declaration(self, symbol: z3.FuncDeclRef) -> Decl:
        """Get the declaration a function symbol was created for."""
        return self.registry.get_decl(symbol)

    def bool_cast(self, term: z3.ExprRef) -> z3.ExprRef:
        """C truthiness of a term (`term != 0` unless already boolean)."""
        return self.forward.bool_cast(term, self)

    def simplify(self, expr: Expr) -> Expr:
        """Encode `expr`, simplify the term with Z3, and decode the result."""
        term = self.term(expr)
        simplified = z3.simplify(term)
        logger.debug("Simplified %s to %s", term, simplified)
        result = self.expression(simplified)
        if result is None:
            raise ShapeMismatchError(f"Simplified term has no expression: {simplified}")
        return result
