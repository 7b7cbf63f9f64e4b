"""
``snapper.aliases``: Shortening type names
==========================================

Type names are printed fully qualified (``tests.models.User``). An alias table
maps module prefixes to replacements. An empty replacement removes the prefix
along with the ``.`` that follows it:

>>> rewrite("examplepkg.User", {"examplepkg": ""})
'User'
>>> rewrite("list[examplepkg.User]", {"examplepkg": "ex"})
'list[ex.User]'

"""
from __future__ import annotations

import re
from typing import Mapping

__all__ = ("Rewriter", "rewrite")


class Rewriter:
    """Apply an alias table to type names.

    All the substitutions are done in one pass: the output of a substitution
    is never matched again. When several prefixes match at the same position
    the longest one wins.
    """

    __slots__ = ("_pattern", "_replacements")

    _pattern: re.Pattern[str] | None
    _replacements: dict[str, str]

    def __init__(self, aliases: Mapping[str, str]) -> None:
        replacements: dict[str, str] = {}
        for old, new in aliases.items():
            if new == "":
                old = old + "."
            if old == "":
                continue
            replacements.setdefault(old, new)
        self._replacements = replacements
        if not replacements:
            self._pattern = None
            return
        # `sorted` is stable so prefixes of the same length keep the order of
        # the alias table.
        alternatives = sorted(replacements, key=len, reverse=True)
        self._pattern = re.compile("|".join(map(re.escape, alternatives)))

    def _replace(self, match: re.Match[str]) -> str:
        return self._replacements[match.group()]

    def rewrite(self, name: str) -> str:
        if self._pattern is None:
            return name
        return self._pattern.sub(self._replace, name)


def rewrite(name: str, aliases: Mapping[str, str]) -> str:
    """Rewrite the module prefixes in *name* according to *aliases*.

    Args:
      name(str): A type name
      aliases: Maps original prefixes to their replacement
    """
    return Rewriter(aliases).rewrite(name)
