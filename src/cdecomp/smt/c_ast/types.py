"""
C type model consumed by the translators.

Types are frozen dataclasses, so two types built from the same kind and
widths compare (and hash) equal. Record types are the exception: they
refer to their declaration, which is identity-keyed.
"""
from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class CType:
    """Base class for all C types."""

    @property
    def width(self) -> int:
        return 0

    def is_boolean(self) -> bool:
        return False

    def is_integer(self) -> bool:
        return False

    def is_signed_integer(self) -> bool:
        return False

    def is_char(self) -> bool:
        return False

    def is_real_floating(self) -> bool:
        return False

    def is_pointer(self) -> bool:
        return False

    def is_array(self) -> bool:
        return False

    def is_structure(self) -> bool:
        return False


@dataclass(frozen=True)
class VoidType(CType):

    def __str__(self) -> str:
        return "void"


@dataclass(frozen=True)
class BoolType(CType):
    """C `_Bool`. Stored in `storage` bits, encoded as an SMT boolean."""
    storage: int = 8

    @property
    def width(self) -> int:
        return self.storage

    @property
    def rank(self) -> int:
        return 0

    def is_boolean(self) -> bool:
        return True

    def is_integer(self) -> bool:
        return True

    def __str__(self) -> str:
        return "_Bool"


@dataclass(frozen=True)
class IntType(CType):
    """Integer type.

    Attributes:
        name: C spelling (e.g. 'unsigned int')
        bits: Bit width
        signed: Whether the type is signed
        rank: Integer conversion rank
        char: Whether this is one of the character types
    """
    name: str
    bits: int
    signed: bool
    rank: int
    char: bool = False

    @property
    def width(self) -> int:
        return self.bits

    def is_integer(self) -> bool:
        return True

    def is_signed_integer(self) -> bool:
        return self.signed

    def is_char(self) -> bool:
        return self.char

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FloatType(CType):
    name: str
    bits: int

    @property
    def width(self) -> int:
        return self.bits

    def is_real_floating(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PointerType(CType):
    pointee: CType
    bits: int = 64

    @property
    def width(self) -> int:
        return self.bits

    def is_pointer(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"{self.pointee} *"


@dataclass(frozen=True)
class ArrayType(CType):
    element: CType
    size: int

    @property
    def width(self) -> int:
        return self.element.width * self.size

    def is_array(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"{self.element}[{self.size}]"


@dataclass(frozen=True)
class RecordType(CType):
    """Structure type; `decl` is the owning RecordDecl."""
    decl: Any

    @property
    def name(self) -> str:
        return self.decl.name

    @property
    def width(self) -> int:
        return self.decl.width

    def is_structure(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"struct {self.name}"


@dataclass(frozen=True)
class FunctionType(CType):
    result: CType
    params: Tuple[CType, ...] = ()

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.params) or "void"
        return f"{self.result} ({params})"
