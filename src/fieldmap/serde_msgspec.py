"""Shared msgspec policy and helpers."""

from __future__ import annotations

from typing import Literal

import msgspec

_DEFAULT_ORDER: Literal["deterministic"] = "deterministic"


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Base struct for strict contracts."""


JSON_ENCODER_SORTED = msgspec.json.Encoder(
    order="sorted",
    decimal_format="string",
    uuid_format="canonical",
)


def to_builtins(obj: object) -> object:
    """Convert an object into builtin JSON-friendly types with string keys.

    Returns
    -------
    object
        Builtin-friendly representation.
    """
    return msgspec.to_builtins(obj, order=_DEFAULT_ORDER, str_keys=True)


__all__ = [
    "JSON_ENCODER_SORTED",
    "StructBaseStrict",
    "to_builtins",
]
