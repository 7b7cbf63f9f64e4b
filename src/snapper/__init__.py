"""Snapshots of python values as they would appear in code"""
from __future__ import annotations

from importlib import metadata

from .aliases import Rewriter, rewrite
from .printer import Printer, dump, dumps, snap
from .shapes import Member, Ref, register

# https://packaging.python.org/en/latest/guides/single-sourcing-package-version/
__version__ = metadata.version(__name__)

__all__ = (
    "Member",
    "Printer",
    "Ref",
    "Rewriter",
    "dump",
    "dumps",
    "register",
    "rewrite",
    "snap",
)
