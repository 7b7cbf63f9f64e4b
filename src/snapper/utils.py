from __future__ import annotations

import pydoc
import types
import typing
from typing import Protocol

locate = pydoc.locate


@typing.runtime_checkable
class QualnameAddressable(Protocol):

    __name__: str
    __qualname__: str
    __module__: str


def get_type_name(v: type | types.ModuleType) -> str:
    """Get the name used to spell a type in a snapshot.

    Builtins are spelled by their bare name; everything else is qualified by
    the module it is defined in:

    >>> get_type_name(int)
    'int'
    >>> import collections
    >>> get_type_name(collections.OrderedDict)
    'collections.OrderedDict'
    """
    if isinstance(v, types.ModuleType):
        return v.__name__
    if not isinstance(v, QualnameAddressable):
        raise TypeError(f"Type {type(v).__name__!r} not supported")
    if v.__module__ == "builtins":
        return v.__qualname__
    # Shorten the names of snapper's own types if possible
    if v.__module__.startswith("snapper."):
        import snapper

        if snapper.__dict__.get(v.__name__, None) is v:
            return f"snapper.{v.__name__}"
    return v.__module__ + "." + v.__qualname__
