"""
Declaration nodes.

Declarations are keyed by identity: two variables with the same name and
type are still distinct declarations.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .types import CType, RecordType


@dataclass(eq=False)
class Decl:
    name: str
    type: CType


@dataclass(eq=False)
class VarDecl(Decl):
    """Local or global variable."""


@dataclass(eq=False)
class FunctionDecl(Decl):
    """Function declaration. Referenced by calls only."""


@dataclass(eq=False)
class FieldDecl(Decl):
    """Structure field; `parent` is the RecordDecl that declares it."""
    parent: Optional["RecordDecl"] = None


@dataclass(eq=False)
class RecordDecl:
    """Structure declaration.

    Attributes:
        name: Record tag name (may be shared by records in different scopes)
        fields: Fields in declaration order
    """
    name: str
    fields: List[FieldDecl] = field(default_factory=list)

    def add_field(self, name: str, type: CType) -> FieldDecl:
        """Declare a new field at the end of the record."""
        fld = FieldDecl(name=name, type=type, parent=self)
        self.fields.append(fld)
        return fld

    def get_field(self, name: str) -> FieldDecl:
        for fld in self.fields:
            if fld.name == name:
                return fld
        raise KeyError(f"No field '{name}' in struct {self.name}")

    @property
    def type(self) -> RecordType:
        return RecordType(self)

    @property
    def width(self) -> int:
        return sum(f.type.width for f in self.fields)
