"""
Reference markers for component fields.

A dataclass field holding another dataclass is picked up by the relation
walk automatically. The markers in this module declare the remaining
cases: fields that hold plain objects which should still appear as nodes
of the component graph.

- `Ref[T]`: the field holds one component of type T
- `RefList[T]`: the field holds an iterable of components
- `RefDict[K, V]`: the field holds a mapping whose values are components

Example:
    Declaring a non-dataclass collaborator::

        from dataclasses import dataclass
        from refviz import Ref, RefList

        class HttpClient:
            def __init__(self, base_url: str) -> None:
                self.base_url = base_url

        @dataclass
        class Worker:
            client: Ref[HttpClient]

        @dataclass
        class Scheduler:
            workers: RefList[Worker]
"""

from typing import Any, Generic, TypeVar

__all__ = [
    "Ref",
    "RefList",
    "RefDict",
]

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


class _MarkerMeta(type):
    """Metaclass giving every marker its `Marker[...]` subscript syntax.

    Each marker class sets `_arity` and `_usage`; subscripting with the
    wrong number of arguments raises `TypeError` quoting `_usage`.
    """

    _arity: int
    _usage: str

    def __getitem__(cls, item: Any) -> Any:
        """Create the alias for `Marker[item]`.

        Args:
            item: A single type argument, or a tuple of them.

        Returns:
            A `_MarkerAlias` recording the marker and its arguments.

        Raises:
            TypeError: If the number of arguments does not match the marker.
        """
        args = item if isinstance(item, tuple) else (item,)
        if len(args) != cls._arity:
            raise TypeError(f"{cls.__name__} expects {cls._arity} argument(s): {cls._usage}")
        return _MarkerAlias(cls, args)


class Ref(Generic[T], metaclass=_MarkerMeta):
    """A field holding a single component of type T.

    The value may be any object; it becomes a node of the rendered graph
    whether or not its class is a dataclass.

    Example::

        @dataclass
        class Worker:
            client: Ref[HttpClient]
            fallback: Ref[HttpClient] | None = None
    """

    __slots__ = ()
    _arity = 1
    _usage = "Ref[T]"


class RefList(Generic[T], metaclass=_MarkerMeta):
    """A field holding a list, tuple or set of components of type T."""

    __slots__ = ()
    _arity = 1
    _usage = "RefList[T]"


class RefDict(Generic[K, V], metaclass=_MarkerMeta):
    """A field holding a mapping whose values are components of type V.

    Keys are never treated as components.
    """

    __slots__ = ()
    _arity = 2
    _usage = "RefDict[K, V]"


class _MarkerAlias:
    """Parameterized marker, e.g. the value of `Ref[Worker]`.

    Exposes `__origin__` and `__args__` so that `typing.get_origin` style
    introspection works, and supports `| None` for optional fields.
    """

    __slots__ = ("__origin__", "__args__")

    def __init__(self, origin: type, args: tuple[Any, ...]) -> None:
        """Initialize an alias.

        Args:
            origin: The marker class, e.g. `Ref`.
            args: The type arguments as a tuple.
        """
        self.__origin__ = origin
        self.__args__ = args

    def __repr__(self) -> str:
        """Return the alias as written, e.g. ``RefDict[str, Handler]``."""
        args_str = ", ".join(
            arg.__name__ if isinstance(arg, type) else repr(arg)
            for arg in self.__args__
        )
        return f"{self.__origin__.__name__}[{args_str}]"

    def __eq__(self, other: object) -> bool:
        """Check equality with another alias.

        Args:
            other: The object to compare with.

        Returns:
            True if both have the same marker and arguments.
        """
        if isinstance(other, _MarkerAlias):
            return (
                self.__origin__ is other.__origin__
                and self.__args__ == other.__args__
            )
        return False

    def __hash__(self) -> int:
        """Return a hash of the marker and arguments."""
        return hash((self.__origin__, self.__args__))

    def __or__(self, other: Any) -> Any:
        """Support `Ref[T] | None`.

        Args:
            other: The type to union with, typically None.

        Returns:
            A `typing.Union` of this alias and `other`.
        """
        import typing

        return typing.Union[self, other]

    def __ror__(self, other: Any) -> Any:
        """Support `None | Ref[T]`, returning `typing.Union[other, self]`."""
        import typing

        return typing.Union[other, self]
