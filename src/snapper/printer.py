"""
``snapper.printer``: Printing snapshots
=======================================

Turns values into composite literals that can be pasted back in a test:

  >>> print(dumps([1, 2], indent="  "))
  list[int]{
    1,
    2,
  }

"""

from __future__ import annotations

import io
import logging
import sys
from typing import Any, Final, Mapping, TextIO

from . import aliases as _aliases
from . import shapes
from .shapes import Shape

__all__ = (
    "DEFAULT_INDENT",
    "USE_SHORT_ANY",
    "Printer",
    "clean_any",
    "dump",
    "dumps",
    "quote",
    "snap",
)

logger = logging.getLogger(__name__)

#: What one level of indentation is printed as.
DEFAULT_INDENT: Final = "\t"

#: Print ``typing.Any`` as ``Any`` in sequence types.
USE_SHORT_ANY: Final = True

_ESCAPES: Final = {
    "\\": "\\\\",
    '"': '\\"',
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _escape(c: str) -> str:
    esc = _ESCAPES.get(c)
    if esc is not None:
        return esc
    if c.isprintable():
        return c
    code = ord(c)
    if code < 0x100:
        return f"\\x{code:02x}"
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def quote(s: str) -> str:
    r"""Quote a string as a double quoted python literal.

    >>> print(quote('say "hi"\n'))
    "say \"hi\"\n"
    """
    return '"' + "".join(_escape(c) for c in s) + '"'


def clean_any(name: str, short: bool = USE_SHORT_ANY) -> str:
    """
    >>> clean_any("list[typing.Any]")
    'list[Any]'
    """
    if short:
        return name.replace(shapes.ANY, "Any")
    return name


class Printer:
    """Write snapshots of values to a text stream.

    Args:
      out: Where the snapshot is written.
      aliases: Module prefixes to rewrite in type names (see
        :mod:`snapper.aliases`).
      indent(str): One level of indentation.
      sort_keys(bool): Print dictionaries sorted by key instead of in
        insertion order.
      short_any(bool): Spell ``typing.Any`` as ``Any`` in sequence types.
    """

    out: TextIO
    rewriter: _aliases.Rewriter
    indent: str
    sort_keys: bool
    short_any: bool
    # ids of the containers we are currently printing
    _visiting: set[int]
    _spell: shapes.TypeSpeller

    def __init__(
        self,
        out: TextIO,
        aliases: Mapping[str, str] | None = None,
        *,
        indent: str = DEFAULT_INDENT,
        sort_keys: bool = False,
        short_any: bool = USE_SHORT_ANY,
    ) -> None:
        assert isinstance(indent, str), indent
        self.out = out
        self.rewriter = _aliases.Rewriter({} if aliases is None else aliases)
        self.indent = indent
        self.sort_keys = sort_keys
        self.short_any = short_any
        self._reset()

    def write(self, s: str) -> None:
        self.out.write(s)

    def _reset(self) -> None:
        self._visiting = set()
        self._spell = shapes.TypeSpeller()

    def type_name(self, v: Any) -> str:
        return self.rewriter.rewrite(self._spell(v))

    def snap(self, v: Any) -> None:
        """Write the snapshot of *v*."""
        try:
            self._snap(v, 0, False)
        finally:
            # Don't hold on to the values we spelled, and start afresh if we
            # were interrupted half way through.
            self._reset()

    def _enter(self, v: Any) -> None:
        addr = id(v)
        if addr in self._visiting:
            raise ValueError("Recursive value found")
        self._visiting.add(addr)

    def _leave(self, v: Any) -> None:
        self._visiting.discard(id(v))

    def _snap(self, v: Any, depth: int, omit_type_name: bool) -> None:
        shape = shapes.classify(v)
        match shape:
            case Shape.NIL:
                self.write("None")
                return
            case Shape.SCALAR:
                self.write(repr(v))
                return
            case Shape.TEXT:
                self.write(quote(v) if type(v) is str else repr(v))
                return
            case Shape.UNSUPPORTED:
                logger.debug(
                    "Skipping value of unsupported type %s",
                    type(v).__qualname__,
                )
                return

        base = self.indent * depth
        inner = base + self.indent
        self._enter(v)
        match shape:
            case Shape.RECORD:
                if not omit_type_name:
                    self.write(self.type_name(v))
                self.write("{")
                for member in shapes.visible_members(v):
                    self.write(f"\n{inner}{member.name}: ")
                    self._snap(member.value, depth + 1, False)
                    self.write(",")
                self.write(f"\n{base}}}")
            case Shape.SEQUENCE:
                name = clean_any(self._spell(v), self.short_any)
                name = self.rewriter.rewrite(name)
                self.write(name + "{")
                for element in shapes.iter_sequence(v):
                    self.write("\n" + inner)
                    self._snap(element, depth + 1, True)
                    self.write(",")
                if v:
                    self.write("\n" + base)
                self.write("}")
            case Shape.MAPPING:
                self.write(self.type_name(v) + "{")
                for key, value in shapes.iter_items(v, self.sort_keys):
                    self.write("\n" + inner)
                    self._snap(key, depth + 1, True)
                    self.write(": ")
                    self._snap(value, depth + 1, True)
                    self.write(",")
                if v:
                    self.write("\n" + base)
                self.write("}")
            case Shape.REFERENCE:
                self.write("&")
                self._snap(v.target, depth, False)
        self._leave(v)


def dump(
    obj: Any,
    fp: TextIO,
    aliases: Mapping[str, str] | None = None,
    *,
    indent: str = DEFAULT_INDENT,
    sort_keys: bool = False,
    short_any: bool = USE_SHORT_ANY,
) -> None:
    """Write a snapshot of *obj* to *fp*.

    Nothing is buffered: the text is written to *fp* as it is produced and
    errors raised by ``fp.write`` are propagated.

    Args:
      obj: The value to print
      fp: A writable text stream
      aliases: Module prefixes to rewrite in type names. An empty replacement
        strips the prefix and the ``.`` that follows it.
      indent(str): One level of indentation.
      sort_keys(bool): Print dictionaries sorted by key.
      short_any(bool): Spell ``typing.Any`` as ``Any`` in sequence types.
    """
    Printer(
        fp,
        aliases,
        indent=indent,
        sort_keys=sort_keys,
        short_any=short_any,
    ).snap(obj)


def dumps(
    obj: Any,
    aliases: Mapping[str, str] | None = None,
    *,
    indent: str = DEFAULT_INDENT,
    sort_keys: bool = False,
    short_any: bool = USE_SHORT_ANY,
) -> str:
    """Return a snapshot of *obj* as a string.

      >>> dumps([])
      'list[Any]{}'
      >>> dumps({"a": [1.5]}, indent="  ")
      'dict[str, list[float]]{\\n  "a": list[float]{\\n    1.5,\\n  },\\n}'

    See :func:`dump` for the arguments.
    """
    buf = io.StringIO()
    dump(
        obj,
        buf,
        aliases,
        indent=indent,
        sort_keys=sort_keys,
        short_any=short_any,
    )
    return buf.getvalue()


def snap(
    obj: Any,
    aliases: Mapping[str, str] | None = None,
    *,
    indent: str = DEFAULT_INDENT,
    sort_keys: bool = False,
    short_any: bool = USE_SHORT_ANY,
) -> None:
    """Print a snapshot of *obj* on the standard output.

    No newline is added after the snapshot.
    """
    dump(
        obj,
        sys.stdout,
        aliases,
        indent=indent,
        sort_keys=sort_keys,
        short_any=short_any,
    )
