"""
Identity registry shared by the forward and reverse translators.

Four single-insertion tables:

    expression   -> term           (keyed by node identity)
    declaration  -> function symbol (keyed by node identity)
    term         -> expression     (keyed by Z3 AST id)
    function sym -> declaration    (keyed by Z3 AST id)

Z3 hash-conses terms within a context, so the AST id of a term is the
identity of its structure. Symbol lookups never go through names, which
are not unique.

Entries keyed by AST id also hold the keyed Z3 object, since Z3 reuses
the ids of collected ASTs.

Two side-tables carry C types that have no place in a term: the
destination type of each `IntToPtr` type tag, and the destination type
of each integral cast term, dropped when casts to different types share
the term.
"""
from typing import Any, Dict, Optional, Tuple
import z3

from ..c_ast import CType, Decl, Expr
from ..errors import DuplicateMappingError, MissingMappingError


class IdentityRegistry:
    """Bijective expression/term and declaration/symbol tables."""

    def __init__(self):
        self._terms: Dict[Expr, z3.ExprRef] = {}
        self._symbols: Dict[Decl, z3.FuncDeclRef] = {}
        self._exprs: Dict[int, Tuple[z3.ExprRef, Optional[Expr]]] = {}
        self._decls: Dict[int, Tuple[z3.FuncDeclRef, Decl]] = {}
        self._tag_types: Dict[int, Tuple[z3.FuncDeclRef, CType]] = {}
        self._type_tags: Dict[CType, z3.ExprRef] = {}
        self._cast_types: Dict[int, Tuple[z3.ExprRef, Optional[CType]]] = {}

    # expression -> term

    def has_term(self, expr: Expr) -> bool:
        return expr in self._terms

    def insert_term(self, expr: Expr, term: z3.ExprRef):
        if expr in self._terms:
            raise DuplicateMappingError("expr->term", expr)
        self._terms[expr] = term

    def get_term(self, expr: Expr) -> z3.ExprRef:
        if expr not in self._terms:
            raise MissingMappingError("expr->term", expr)
        return self._terms[expr]

    # declaration -> function symbol

    def has_symbol(self, decl: Decl) -> bool:
        return decl in self._symbols

    def insert_symbol(self, decl: Decl, symbol: z3.FuncDeclRef):
        if decl in self._symbols:
            raise DuplicateMappingError("decl->symbol", decl)
        self._symbols[decl] = symbol

    def get_symbol(self, decl: Decl) -> z3.FuncDeclRef:
        if decl not in self._symbols:
            raise MissingMappingError("decl->symbol", decl)
        return self._symbols[decl]

    # term -> expression

    def has_expr(self, term: z3.ExprRef) -> bool:
        return term.get_id() in self._exprs

    def insert_expr(self, term: z3.ExprRef, expr: Optional[Expr]):
        """Map a term to its expression. Auxiliary terms map to None."""
        key = term.get_id()
        if key in self._exprs:
            raise DuplicateMappingError("term->expr", term)
        self._exprs[key] = (term, expr)

    def get_expr(self, term: z3.ExprRef) -> Optional[Expr]:
        key = term.get_id()
        if key not in self._exprs:
            raise MissingMappingError("term->expr", term)
        return self._exprs[key][1]

    # function symbol -> declaration

    def has_decl(self, symbol: z3.FuncDeclRef) -> bool:
        return symbol.get_id() in self._decls

    def insert_decl(self, symbol: z3.FuncDeclRef, decl: Decl):
        key = symbol.get_id()
        if key in self._decls:
            raise DuplicateMappingError("symbol->decl", symbol)
        self._decls[key] = (symbol, decl)

    def get_decl(self, symbol: z3.FuncDeclRef) -> Decl:
        key = symbol.get_id()
        if key not in self._decls:
            raise MissingMappingError("symbol->decl", symbol)
        return self._decls[key][1]

    # type tags

    def lookup_type_tag(self, type: CType) -> Optional[z3.ExprRef]:
        return self._type_tags.get(type)

    def insert_type_tag(self, tag: z3.ExprRef, type: CType):
        key = tag.decl().get_id()
        if key in self._tag_types:
            raise DuplicateMappingError("tag->type", tag)
        if type in self._type_tags:
            raise DuplicateMappingError("type->tag", type)
        self._tag_types[key] = (tag.decl(), type)
        self._type_tags[type] = tag

    def is_type_tag(self, symbol: z3.FuncDeclRef) -> bool:
        return symbol.get_id() in self._tag_types

    def get_tag_type(self, symbol: z3.FuncDeclRef) -> CType:
        key = symbol.get_id()
        if key not in self._tag_types:
            raise MissingMappingError("tag->type", symbol)
        return self._tag_types[key][1]

    # cast destination types

    def record_cast_type(self, term: z3.ExprRef, type: CType):
        """Remember `type` as the destination type of `term`.

        Casts to different types can share one term; once two types
        disagree the term has no recorded type.
        """
        key = term.get_id()
        entry = self._cast_types.get(key)
        if entry is None:
            self._cast_types[key] = (term, type)
        elif entry[1] is not None and entry[1] != type:
            self._cast_types[key] = (term, None)

    def get_cast_type(self, term: z3.ExprRef) -> Optional[CType]:
        entry = self._cast_types.get(term.get_id())
        return entry[1] if entry else None

    def counts(self) -> Dict[str, Any]:
        """Number of entries per table."""
        return {
            "expr->term": len(self._terms),
            "decl->symbol": len(self._symbols),
            "term->expr": len(self._exprs),
            "symbol->decl": len(self._decls),
            "type tags": len(self._tag_types),
        }
