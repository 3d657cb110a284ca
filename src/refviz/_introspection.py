"""
Introspection of reference markers.

`get_refs` reads the annotations of a class and reports which fields are
declared with `Ref`, `RefList` or `RefDict`. The relation walk uses it to
find components stored in fields that are not dataclass-valued.

Example:
    Inspecting a class::

        from dataclasses import dataclass
        from refviz import Ref, RefList, get_refs

        @dataclass
        class Scheduler:
            clock: Ref[Clock]
            workers: RefList[Worker]
            name: str

        refs = get_refs(Scheduler)
        print(refs["workers"].is_list)  # True
        print("name" in refs)  # False
"""

from dataclasses import dataclass
from types import UnionType
from typing import Any, Union, get_args, get_origin, get_type_hints

from refviz._types import Ref, RefDict, RefList

__all__ = [
    "RefInfo",
    "get_refs",
]


@dataclass(frozen=True)
class RefInfo:
    """Metadata about a reference field.

    Attributes:
        field: The name of the annotated field.
        target: The declared component type. May be a string when the
            marker was given a forward reference.
        is_list: True if the field is a `RefList`.
        is_dict: True if the field is a `RefDict`.
        is_optional: True if the field also admits None.
    """

    field: str
    target: Any
    is_list: bool = False
    is_dict: bool = False
    is_optional: bool = False


def get_refs(cls: type) -> dict[str, RefInfo]:
    """Extract reference information from a class.

    Handles `Ref[T]`, `RefList[T]`, `RefDict[K, V]` and their optional
    forms (`Ref[T] | None`, `Optional[Ref[T]]`). Inherited annotations
    are included.

    Args:
        cls: The class to analyze.

    Returns:
        A dictionary mapping field names to `RefInfo` objects, in
        annotation order. Fields without a reference marker are not
        included.
    """
    refs: dict[str, RefInfo] = {}

    try:
        hints = get_type_hints(cls, include_extras=True)
    except Exception:
        # Unresolvable forward references: the class declares no usable refs
        return refs

    for name, hint in hints.items():
        info = _analyze_type(name, hint)
        if info is not None:
            refs[name] = info

    return refs


def _get_origin(hint: Any) -> Any:
    """Get the origin of a type hint, including marker aliases.

    Args:
        hint: A type hint to analyze.

    Returns:
        The origin (e.g. `Ref` for `Ref[T]`), or None for plain hints.
    """
    origin = get_origin(hint)
    if origin is not None:
        return origin
    # marker aliases are not typing generics
    return getattr(hint, "__origin__", None)


def _get_args(hint: Any) -> tuple[Any, ...]:
    """Get the type arguments of a type hint, including marker aliases.

    Args:
        hint: A type hint to analyze.

    Returns:
        The arguments (e.g. `(Worker,)` for `RefList[Worker]`), or an
        empty tuple.
    """
    args = get_args(hint)
    if args:
        return args
    result: tuple[Any, ...] = getattr(hint, "__args__", ())
    return result


def _analyze_type(field: str, hint: Any) -> RefInfo | None:
    """Return a `RefInfo` if `hint` is a (possibly optional) reference marker."""
    origin = _get_origin(hint)
    args = _get_args(hint)

    if origin is Union or origin is UnionType:
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1:
            inner = _analyze_type(field, non_none_args[0])
            if inner is not None:
                return RefInfo(
                    field=inner.field,
                    target=inner.target,
                    is_list=inner.is_list,
                    is_dict=inner.is_dict,
                    is_optional=True,
                )
        return None

    if origin is Ref:
        return RefInfo(field=field, target=args[0])

    if origin is RefList:
        return RefInfo(field=field, target=args[0], is_list=True)

    if origin is RefDict:
        # the value type is the component type
        return RefInfo(field=field, target=args[1], is_dict=True)

    return None
