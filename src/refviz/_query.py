"""
Relation discovery over component graphs.

`relation` walks the object graph held by a root component and returns
the (holder, held) pairs between components. A component is a dataclass
instance, or any object stored in a field declared with `Ref`, `RefList`
or `RefDict`.

A predicate can restrict which components take part in the result.
Rejected components are still traversed, and every accepted component is
linked to its nearest accepted holders, so that hiding an intermediate
layer does not disconnect the graph.

Example:
    Listing the dependencies of a small graph::

        from dataclasses import dataclass
        from refviz import relation

        @dataclass
        class Logger:
            level: str

        @dataclass
        class Worker:
            logger: Logger

        @dataclass
        class App:
            workers: list[Worker]
            logger: Logger

        log = Logger("info")
        app = App(workers=[Worker(log), Worker(log)], logger=log)
        pairs = relation(app)
        # [(app, w1), (app, w2), (app, log), (w1, log), (w2, log)]
"""

import dataclasses
import logging
from collections.abc import Callable, Mapping
from typing import Any

from refviz._introspection import RefInfo, get_refs

__all__ = [
    "ComponentFilter",
    "relation",
]

logger = logging.getLogger(__name__)

ComponentFilter = Callable[[Any], bool]

_SEQUENCES = (list, tuple, set, frozenset)


def relation(root: Any, filter: ComponentFilter | None = None) -> list[tuple[Any, Any]]:
    """Return the dependency pairs reachable from `root`.

    Components are visited depth-first, fields in declaration order, so
    the result is deterministic for a given graph. Cycles are cut by
    object identity and the walk always terminates.

    Args:
        root: The component to start from.
        filter: Predicate deciding which components appear in the result.
            Defaults to accepting every component. Exceptions raised by
            the predicate propagate to the caller.

    Returns:
        A list of (source, target) pairs where source holds target,
        directly or through rejected components. Both endpoints satisfy
        `filter`. A pair is repeated when target is reachable from source
        along several paths.
    """
    walk = _RelationWalk(filter if filter is not None else _accept_all)
    components = walk.components(root)

    pairs: list[tuple[Any, Any]] = []
    for component in components:
        if walk.accepts(component):
            pairs.extend((component, target) for target in walk.nearest_accepted(component))

    logger.debug(
        "Walked %d components from %s, found %d pairs",
        len(components),
        type(root).__name__,
        len(pairs),
    )
    return pairs


def _accept_all(component: Any) -> bool:
    """Default filter: every component takes part in the relation."""
    return True


def _is_component(value: Any) -> bool:
    """Return True for dataclass instances (not dataclass classes)."""
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


class _RelationWalk:
    """Per-call caches for a single `relation` walk.

    Both caches are keyed by `id()`. The `_seen` map keeps every visited
    component alive for the duration of the walk so ids stay unique.
    """

    def __init__(self, accept: ComponentFilter) -> None:
        self._accept = accept
        self._accepted: dict[int, bool] = {}
        self._children: dict[int, list[Any]] = {}
        self._refs: dict[type, dict[str, RefInfo]] = {}
        self._seen: dict[int, Any] = {}

    def components(self, root: Any) -> list[Any]:
        """Every component reachable from `root`, in depth-first preorder."""
        order: list[Any] = []
        stack = [root]
        while stack:
            current = stack.pop()
            if id(current) in self._seen:
                continue
            self._seen[id(current)] = current
            order.append(current)
            stack.extend(reversed(self.children(current)))
        return order

    def accepts(self, component: Any) -> bool:
        """Apply the filter to `component`, at most once per component.

        Args:
            component: A component reached by the walk.

        Returns:
            The cached result of the filter.
        """
        key = id(component)
        if key not in self._accepted:
            self._accepted[key] = bool(self._accept(component))
        return self._accepted[key]

    def nearest_accepted(self, component: Any) -> list[Any]:
        """Accepted components held by `component`, looking through rejected ones."""
        found: list[Any] = []
        crossed: set[int] = set()
        stack = list(reversed(self.children(component)))
        while stack:
            current = stack.pop()
            if self.accepts(current):
                found.append(current)
                continue
            if id(current) in crossed:
                continue
            crossed.add(id(current))
            stack.extend(reversed(self.children(current)))
        return found

    def children(self, component: Any) -> list[Any]:
        """Components held directly by `component`, read once and cached."""
        key = id(component)
        if key not in self._children:
            self._children[key] = self._read_children(component)
        return self._children[key]

    def _read_children(self, component: Any) -> list[Any]:
        """Read the dataclass fields and marked fields of `component`, in that order."""
        refs = self._refs_of(type(component))
        names: list[str] = []
        if _is_component(component):
            names.extend(f.name for f in dataclasses.fields(component))
        names.extend(name for name in refs if name not in names)

        children: list[Any] = []
        for name in names:
            value = getattr(component, name, None)
            children.extend(_components_in(value, refs.get(name)))
        return children

    def _refs_of(self, cls: type) -> dict[str, RefInfo]:
        """`get_refs` for `cls`, cached for the walk."""
        if cls not in self._refs:
            self._refs[cls] = get_refs(cls)
        return self._refs[cls]


def _components_in(value: Any, info: RefInfo | None) -> list[Any]:
    """Components stored in one field value.

    Values of declared reference fields are components whatever their
    class; other values only when they are dataclass instances. A
    `RefList` value that is not a list, tuple or set, and a `RefDict`
    value that is not a mapping, hold no components.

    Args:
        value: The field value.
        info: The field's reference metadata, or None for unmarked fields.

    Returns:
        The components held by `value`, in iteration order.
    """
    if _is_leaf(value):
        return []

    if info is not None:
        if info.is_dict:
            items = list(value.values()) if isinstance(value, Mapping) else []
        elif info.is_list:
            items = list(value) if isinstance(value, _SEQUENCES) else []
        else:
            items = [value]
        return [item for item in items if not _is_leaf(item)]

    if _is_component(value):
        return [value]
    if isinstance(value, _SEQUENCES):
        return [item for item in value if _is_component(item)]
    if isinstance(value, Mapping):
        return [item for item in value.values() if _is_component(item)]
    return []


def _is_leaf(value: Any) -> bool:
    """Return True for values that are never components, even in marked fields."""
    return value is None or isinstance(value, (str, bytes, type))
