"""
Translation options.
"""
from dataclasses import dataclass, fields, replace
import os
from typing import Mapping, Optional

_ENV_PREFIX = "CDECOMP_SMT_"
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class TranslationOptions:
    """Knobs for one translation context.

    Attributes:
        unique_record_sorts: Give same-named records in different scopes
            distinct sorts (S, S!1, S!2, ...) instead of aliasing them
        simplify_bool_casts: Simplify the `e != 0` comparison produced
            when a non-boolean value is used as a condition
        record_cast_types: Remember the destination type of each integral
            cast so decoding can restore it
    """
    unique_record_sorts: bool = True
    simplify_bool_casts: bool = True
    record_cast_types: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TranslationOptions":
        """Build options, overriding defaults from $CDECOMP_SMT_<FIELD>."""
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = env.get(_ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            val = raw.strip().lower()
            if val in _TRUE:
                overrides[f.name] = True
            elif val in _FALSE:
                overrides[f.name] = False
            else:
                raise ValueError(
                    f"Invalid value for {_ENV_PREFIX}{f.name.upper()}: {raw!r}")
        return replace(cls(), **overrides)
