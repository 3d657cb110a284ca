"""
refviz: Graphviz views of dataclass component graphs.

This package renders the wiring of an application built from plain
dataclasses (a root component and everything it transitively holds) as
a Graphviz DOT document, for inspection and documentation.

Overview:
    - `as_dot_string(root)`: Render the graph reachable from `root`
    - `package_filter(include, exclude)`: Select components by module
    - `relation(root, filter)`: List the (holder, held) pairs

    Lower-level steps, for custom pipelines:

    - `assemble`: Label and deduplicate discovered pairs
    - `build_index` / `node_label`: Number instances of the same class
    - `render_dot`: Write sorted nodes and edges as DOT

    Reference markers, for fields holding non-dataclass components:

    - `Ref[T]`, `RefList[T]`, `RefDict[K, V]`
    - `get_refs(cls)`: Inspect the marked fields of a class

Quick Start:
    Rendering an application graph::

        from dataclasses import dataclass
        from refviz import as_dot_string

        @dataclass
        class Database:
            url: str

        @dataclass
        class Repository:
            db: Database

        @dataclass
        class App:
            users: Repository
            orders: Repository

        db = Database("postgres://")
        app = App(users=Repository(db), orders=Repository(db))
        print(as_dot_string(app))

    Output::

        strict digraph {
          "App" [shape=box];
          "Database" [shape=box];
          "Repository # 1/2" [shape=box];
          "Repository # 2/2" [shape=box];
          "App" -> "Repository # 1/2"
          "App" -> "Repository # 2/2"
          "Repository # 1/2" -> "Database"
          "Repository # 2/2" -> "Database"
        }

    Pipe the result to ``dot -Tsvg`` to draw it.

Logging:
    Modules log at DEBUG level under the ``refviz`` logger. No handler is
    configured beyond a `logging.NullHandler`.
"""

import logging

from refviz._filters import package_filter
from refviz._introspection import (
    RefInfo,
    get_refs,
)
from refviz._query import (
    ComponentFilter,
    relation,
)
from refviz._types import (
    Ref,
    RefDict,
    RefList,
)
from refviz._visualize import (
    DEFAULT_NODE_FORMAT,
    Edge,
    Graph,
    InstanceIndex,
    InvariantViolation,
    Node,
    as_dot_string,
    assemble,
    build_index,
    node_label,
    render_dot,
    type_name,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Rendering
    "as_dot_string",
    "assemble",
    "build_index",
    "node_label",
    "render_dot",
    "type_name",
    "DEFAULT_NODE_FORMAT",
    "Node",
    "Edge",
    "Graph",
    "InstanceIndex",
    "InvariantViolation",
    # Discovery
    "relation",
    "package_filter",
    "ComponentFilter",
    # Reference markers
    "Ref",
    "RefList",
    "RefDict",
    "RefInfo",
    "get_refs",
]

__version__ = "0.1.0"
