"""
``snapper.shapes``: Classifying values
======================================

Every value is classified into one :class:`Shape` which decides how it gets
printed. We only handle a small, closed set of types out of the box:

+ :const:`None`, :class:`bool`, :class:`int`, :class:`float`: scalars
+ :class:`str`, :class:`bytes`: text
+ :class:`list`, :class:`tuple`, :class:`set`, :class:`frozenset`: sequences
+ :class:`dict`: mappings
+ :class:`Ref`: references
+ dataclasses, :func:`typing.NamedTuple` and any type added via
  :func:`register`: records

"""
from __future__ import annotations

import dataclasses
import enum
import inspect
import typing
import weakref
from typing import (
    Any,
    Callable,
    Final,
    Generic,
    Iterable,
    Iterator,
    Type,
    TypeAlias,
    TypeVar,
)

from snapper import utils

T = TypeVar("T")

__all__ = (
    "ANY",
    "Member",
    "Ref",
    "Shape",
    "TypeSpeller",
    "classify",
    "iter_items",
    "iter_sequence",
    "register",
    "type_expr",
    "visible_members",
)

#: Spelling of the element type of containers we can't say anything about.
ANY: Final = "typing.Any"


class Shape(enum.Enum):
    "The structural classification of a value"
    NIL = enum.auto()
    SCALAR = enum.auto()
    TEXT = enum.auto()
    RECORD = enum.auto()
    SEQUENCE = enum.auto()
    MAPPING = enum.auto()
    REFERENCE = enum.auto()
    UNSUPPORTED = enum.auto()


SCALAR_TYPES: Final = (bool, int, float)
TEXT_TYPES: Final = (str, bytes)
SEQUENCE_TYPES: Final = (list, tuple, set, frozenset)


@dataclasses.dataclass(frozen=True, slots=True)
class Ref(Generic[T]):
    """A reference to another value.

    Python doesn't have pointers so references have to be spelled out. A
    reference prints as ``&`` followed by the value it points to::

        >>> import snapper
        >>> snapper.dumps(snapper.Ref(5))
        '&5'
    """

    target: T


@dataclasses.dataclass(frozen=True, slots=True)
class Member:
    """A named member of a record.

    Members that aren't *exported* are never printed.
    """

    name: str
    value: Any
    exported: bool = True


def is_exported(name: str) -> bool:
    return not name.startswith("_")


Describer: TypeAlias = Callable[[T], Iterable[Member]]

DISPATCH_TABLE = weakref.WeakKeyDictionary[Type[Any], Describer[Any]]()


def _infer_describer_type(f: Describer[T]) -> Type[T]:
    # The type is read off the annotation of the sole parameter. Generic
    # aliases (``list[int]``) are registered for their origin (``list``).
    params = list(inspect.signature(f, eval_str=True).parameters.values())
    if len(params) != 1:
        raise ValueError(
            f"Cannot infer what {f!r} describes: a describer takes exactly "
            f"one parameter (got {len(params)})"
        )
    [param] = params
    ty: Type[T] | None = param.annotation
    origin = typing.get_origin(ty)
    if origin is not None:
        ty = origin
    assert ty is not None
    return ty


@typing.overload
def register(function: Describer[T], /) -> Describer[T]:  # pragma: no cover
    ...


@typing.overload
def register(
    *, type: Type[T] | None = None
) -> Callable[[Describer[T]], Describer[T]]:  # pragma: no cover
    ...


def register(
    function: Describer[T] | None = None,
    /,
    *,
    type: Type[T] | None = None,
) -> Describer[T] | Callable[[Describer[T]], Describer[T]]:
    """Teach snapper to print values of a class as records.

    A describer receives one value and yields its :class:`Member` entries,
    first to last, in the order they should appear in the snapshot. Members
    marked as not exported are left out of the output.

    The class is taken from *type* when it's given and from the annotation
    of the describer's parameter otherwise. :func:`register` works both as a
    bare decorator and as a decorator factory:

        >>> from fractions import Fraction
        >>> @register
        ... def _describe_fraction(f: Fraction):
        ...   yield Member("numerator", f.numerator)
        ...   yield Member("denominator", f.denominator)

        >>> from snapper import dumps
        >>> print(dumps(Fraction(3, 4), indent="  "))
        fractions.Fraction{
          numerator: 3,
          denominator: 4,
        }
        >>> del DISPATCH_TABLE[Fraction]

    A describer overrides the builtin handling of dataclasses and named
    tuples for its class. Lookups match the class exactly, so a subclass
    needs a describer of its own.

    Args:
      function: Lists the members of a value.
      type: The class *function* describes. Defaults to the annotation of
        *function*'s parameter.
    """

    def wrapper(function: Describer[T]) -> Describer[T]:
        cls = _infer_describer_type(function) if type is None else type
        DISPATCH_TABLE[cls] = function
        return function

    if function is None:
        return wrapper
    return wrapper(function)


def _describe_dataclass(v: Any) -> Iterator[Member]:
    for field in dataclasses.fields(v):
        yield Member(
            field.name, getattr(v, field.name), is_exported(field.name)
        )


def _describe_namedtuple(v: Any) -> Iterator[Member]:
    for name, value in zip(type(v)._fields, v, strict=True):
        yield Member(name, value, is_exported(name))


def _get_describer(ty: Type[T]) -> Describer[T] | None:
    describer = DISPATCH_TABLE.get(ty)
    if describer is not None:
        return describer
    if dataclasses.is_dataclass(ty):
        return _describe_dataclass
    if issubclass(ty, tuple) and hasattr(ty, "_fields"):
        return _describe_namedtuple
    return None


def classify(v: Any) -> Shape:
    # We do exact type comparisons instead of calls to `isinstance` to
    # avoid running into problems with inheritance
    if v is None:
        return Shape.NIL
    ty = type(v)
    if ty in SCALAR_TYPES:
        return Shape.SCALAR
    if ty in TEXT_TYPES:
        return Shape.TEXT
    if ty is Ref:
        return Shape.REFERENCE
    if ty in SEQUENCE_TYPES:
        return Shape.SEQUENCE
    if ty is dict:
        return Shape.MAPPING
    if _get_describer(ty) is not None:
        return Shape.RECORD
    return Shape.UNSUPPORTED


def visible_members(v: Any) -> Iterator[Member]:
    """The exported members of a record, in declaration order."""
    describer = _get_describer(type(v))
    if describer is None:
        raise TypeError(f"Object of type {type(v).__name__} is not a record")
    for member in describer(v):
        if not isinstance(member, Member):
            raise TypeError(
                f"Describer for {type(v).__name__} returned "
                f"{type(member).__name__!r} instead of a Member"
            )
        if member.exported:
            yield member


def _ordered(
    values: Iterable[T], key: Callable[[T], Any] | None = None
) -> list[T]:
    try:
        return sorted(values, key=key)  # type: ignore[arg-type]
    except TypeError:
        # Mixed types can't be compared, fall back on iteration order
        return list(values)


def iter_sequence(
    v: list[T] | tuple[T, ...] | set[T] | frozenset[T]
) -> Iterable[T]:
    """Elements of a sequence in the order they are printed.

    Sets have no order so we sort them whenever their elements can be
    compared.
    """
    if type(v) in (set, frozenset):
        return _ordered(v)
    return v


def _key(item: tuple[Any, Any]) -> Any:
    return item[0]


def iter_items(
    v: dict[Any, Any], sort_keys: bool = False
) -> Iterable[tuple[Any, Any]]:
    if sort_keys:
        return _ordered(v.items(), key=_key)
    return v.items()


CONTAINER_TYPES: Final = (*SEQUENCE_TYPES, dict, Ref)


def _join(exprs: dict[str, None], sort: bool = False) -> str:
    if not exprs:
        return ANY
    if sort:
        return " | ".join(sorted(exprs))
    return " | ".join(exprs)


class TypeSpeller:
    """Spell out the types of values the way they would be annotated.

    Containers don't carry the type of their elements so we use the union of
    the types of the elements that are actually in them. The spelling of every
    container is remembered: a printer asks for the type of a list and then
    for the types of each of its elements, which have already been spelled.
    """

    # id -> (value, spelling). We hold on to the values themselves so their
    # `id` can't be reused by another object while we are alive.
    _memo: dict[int, tuple[Any, str]]
    # ids of the containers we are currently spelling
    _visiting: set[int]

    def __init__(self) -> None:
        self._memo = {}
        self._visiting = set()

    def __call__(self, v: Any) -> str:
        # This function recurses once per level of nesting so we use plain
        # loops (instead of generators or comprehensions) to keep the stack
        # shallow.
        if v is None:
            return "None"
        ty = type(v)
        if ty not in CONTAINER_TYPES:
            return utils.get_type_name(ty)
        addr = id(v)
        memoized = self._memo.get(addr)
        if memoized is not None:
            return memoized[1]
        if addr in self._visiting:
            raise ValueError("Recursive value found")
        self._visiting.add(addr)
        res: str
        if ty is Ref:
            res = f"{utils.get_type_name(Ref)}[{self(v.target)}]"
        elif ty is dict:
            keys: dict[str, None] = {}
            values: dict[str, None] = {}
            for key, value in v.items():
                keys[self(key)] = None
                values[self(value)] = None
            res = f"dict[{_join(keys)}, {_join(values)}]"
        elif ty is tuple:
            elts: list[str] = []
            for x in v:
                elts.append(self(x))
            res = f"tuple[{', '.join(elts) or '()'}]"
        else:
            exprs: dict[str, None] = {}
            for x in v:
                exprs[self(x)] = None
            sort = ty in (set, frozenset)
            res = f"{ty.__name__}[{_join(exprs, sort=sort)}]"
        self._visiting.discard(addr)
        self._memo[addr] = (v, res)
        return res


def type_expr(v: Any) -> str:
    """Spell out the type of *v* (see :class:`TypeSpeller`).

    >>> type_expr([1, 2, "a"])
    'list[int | str]'
    >>> type_expr({"a": (1.0, None)})
    'dict[str, tuple[float, None]]'
    >>> type_expr([])
    'list[typing.Any]'
    """
    return TypeSpeller()(v)
