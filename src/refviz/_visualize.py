"""
Graphviz DOT rendering of component graphs.

The pipeline has four steps, each exposed so it can be used on its own:

1. `relation` (or any callable with the same signature) lists the
   (holder, held) pairs reachable from a root.
2. `build_index` numbers the instances of each class.
3. `assemble` turns the pairs into labeled, deduplicated nodes and edges.
4. `render_dot` writes them out as a sorted ``strict digraph``.

`as_dot_string` runs the whole pipeline.

Example:
    Rendering a root with two workers sharing a logger::

        from refviz import as_dot_string

        print(as_dot_string(app))
        # strict digraph {
        #   "App" [shape=box];
        #   "Logger" [shape=box];
        #   "Worker # 1/2" [shape=box];
        #   "Worker # 2/2" [shape=box];
        #   "App" -> "Logger"
        #   "App" -> "Worker # 1/2"
        #   "App" -> "Worker # 2/2"
        #   "Worker # 1/2" -> "Logger"
        #   "Worker # 2/2" -> "Logger"
        # }

Node labels are written between double quotes as they are; class names
containing a double quote are not escaped.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from refviz._query import ComponentFilter, relation

__all__ = [
    "DEFAULT_NODE_FORMAT",
    "Discover",
    "Edge",
    "Graph",
    "InstanceIndex",
    "InvariantViolation",
    "Node",
    "as_dot_string",
    "assemble",
    "build_index",
    "node_label",
    "render_dot",
    "type_name",
]

logger = logging.getLogger(__name__)

DEFAULT_NODE_FORMAT = "[shape=box]"

InstanceIndex = dict[int, tuple[int, int]]
Discover = Callable[[Any, ComponentFilter | None], Sequence[tuple[Any, Any]]]

# generic parameters, "<locals>"/"<lambda>" markers, JVM-style "$" suffixes
_SYNTHETIC_SUFFIX = re.compile(r"[<\[$].*$", re.DOTALL)


class InvariantViolation(RuntimeError):
    """An internal contract was broken, e.g. a component with no class name.

    This signals a bug in the discovery callable or in the caller's
    classes, never a recoverable condition.
    """


def type_name(component: Any) -> str:
    """Return the display name of a component's class.

    The simple class name with synthetic artifacts stripped.

    Raises:
        InvariantViolation: If no name is left after stripping.
    """
    raw = getattr(type(component), "__name__", None)
    name = _SYNTHETIC_SUFFIX.sub("", raw).strip() if isinstance(raw, str) else ""
    if not name:
        raise InvariantViolation(
            f"Cannot determine a type name for component of class {type(component)!r}"
        )
    return name


def _type_key(component: Any) -> str:
    """Return the grouping key of a component: its class's module and qualified name."""
    cls = type(component)
    return f"{cls.__module__}.{cls.__qualname__}"


def build_index(components: Iterable[Any]) -> InstanceIndex:
    """Number the instances of each class.

    Components are grouped by the qualified name of their class, and each
    member of a group gets a position from 1 to the group size, in
    iteration order. The input must already be free of duplicates.

    Args:
        components: Distinct components.

    Returns:
        A mapping from `id(component)` to ``(position, total)``.
    """
    groups: dict[str, list[Any]] = {}
    for component in components:
        groups.setdefault(_type_key(component), []).append(component)

    index: InstanceIndex = {}
    for members in groups.values():
        for position, member in enumerate(members, start=1):
            index[id(member)] = (position, len(members))
    return index


def node_label(component: Any, index: InstanceIndex) -> str:
    """Return the unquoted label of a component.

    ``Worker`` for the only Worker of the graph, ``Worker # 2/3`` for the
    second of three.

    Args:
        component: The component to label.
        index: The instance index built over the whole graph.

    Returns:
        The label, without quotes.

    Raises:
        InvariantViolation: If `component` has no entry in `index`, or its
            class has no usable name.
    """
    name = type_name(component)
    if id(component) not in index:
        raise InvariantViolation(f"Component {name} is missing from the instance index")
    position, total = index[id(component)]
    if total > 1:
        return f"{name} # {position}/{total}"
    return name


@dataclass(frozen=True, eq=False)
class Node:
    """A labeled component. Nodes are equal when they wrap the same object."""

    component: Any
    label: str

    def __eq__(self, other: object) -> bool:
        """Compare by the identity of the wrapped component, ignoring labels."""
        if isinstance(other, Node):
            return self.component is other.component
        return NotImplemented

    def __hash__(self) -> int:
        """Hash by `id()` of the wrapped component."""
        return id(self.component)


@dataclass(frozen=True)
class Edge:
    """A `source` component holding a `target` component."""

    source: Node
    target: Node


@dataclass(frozen=True)
class Graph:
    """The deduplicated nodes and edges of a component graph."""

    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]


def assemble(
    root: Any,
    filter: ComponentFilter | None = None,
    discover: Discover = relation,
) -> Graph:
    """Collect and label the component graph reachable from `root`.

    The nodes are the endpoints of the discovered pairs, deduplicated by
    identity in order of first appearance (all sources, then all targets).
    A single instance index is built over them and used for every label,
    so a component carries the same label on its node and on all its
    edges. Edges are deduplicated by the identity of their endpoints.

    Args:
        root: The component to start from.
        filter: Predicate passed on to `discover`.
        discover: Callable returning the (source, target) pairs for
            `root` and `filter`. Its exceptions propagate unchanged.

    Returns:
        The assembled `Graph`. A root without dependencies yields an
        empty graph.
    """
    pairs = list(discover(root, filter))

    distinct: dict[int, Any] = {}
    for source, _ in pairs:
        distinct.setdefault(id(source), source)
    for _, target in pairs:
        distinct.setdefault(id(target), target)

    index = build_index(distinct.values())
    nodes = {key: Node(component, node_label(component, index)) for key, component in distinct.items()}

    edges: dict[tuple[int, int], Edge] = {}
    for source, target in pairs:
        key = (id(source), id(target))
        if key not in edges:
            edges[key] = Edge(nodes[key[0]], nodes[key[1]])

    logger.debug(
        "Assembled %d nodes and %d edges from %d pairs", len(nodes), len(edges), len(pairs)
    )
    return Graph(nodes=tuple(nodes.values()), edges=tuple(edges.values()))


def render_dot(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    node_format: str = DEFAULT_NODE_FORMAT,
) -> str:
    """Write nodes and edges as a Graphviz ``strict digraph``.

    Nodes are sorted by label, edges by source label then target label.
    Node declarations end with ``;`` and carry `node_format`; edge
    declarations do not. A block with no entries is left out, so an
    empty graph renders as ``strict digraph {`` followed by ``}``, and a
    graph without edges has no blank line before the closing brace. Output
    for those two cases therefore differs from writers that always emit
    both blocks; non-empty graphs are unaffected.

    Args:
        nodes: The nodes to declare.
        edges: The edges to draw.
        node_format: Attribute list appended to every node declaration.

    Returns:
        The DOT text, without a trailing newline.
    """
    lines = ["strict digraph {"]
    lines.extend(
        f'  "{node.label}" {node_format};'
        for node in sorted(nodes, key=lambda n: n.label)
    )
    lines.extend(
        f'  "{edge.source.label}" -> "{edge.target.label}"'
        for edge in sorted(edges, key=lambda e: (e.source.label, e.target.label))
    )
    lines.append("}")
    return "\n".join(lines)


def as_dot_string(
    root: Any,
    filter: ComponentFilter | None = None,
    node_format: str = DEFAULT_NODE_FORMAT,
    discover: Discover = relation,
) -> str:
    """Render the component graph reachable from `root` as DOT text.

    Args:
        root: The component to start from.
        filter: Optional predicate selecting the components to show,
            e.g. one built with `package_filter`.
        node_format: Attribute list for node declarations.
        discover: Relation discovery callable, `relation` by default.

    Returns:
        The DOT text. Any error raised while discovering or labeling
        aborts the call; no partial output is returned.
    """
    graph = assemble(root, filter, discover)
    return render_dot(graph.nodes, graph.edges, node_format)
