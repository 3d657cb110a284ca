"""Component filters for `relation` and `as_dot_string`."""

import re
from typing import Any

from refviz._query import ComponentFilter

__all__ = [
    "package_filter",
]


def package_filter(
    include: str | re.Pattern[str] = ".*",
    exclude: str | re.Pattern[str] | None = None,
) -> ComponentFilter:
    """Build a filter keeping components by the module of their class.

    A component is kept when its class's module matches `include` and
    does not match `exclude`. Patterns are searched anywhere in the module
    name, so anchor them (``^myapp\\.``) to match a package prefix.

    Args:
        include: Pattern the module name must match. Defaults to any module.
        exclude: Optional pattern rejecting modules that `include` accepted.

    Returns:
        A predicate over components.

    Example:
        Hiding infrastructure components::

            from refviz import as_dot_string, package_filter

            dot = as_dot_string(app, filter=package_filter(exclude=r"^myapp\\.infra"))
    """
    included = re.compile(include)
    excluded = re.compile(exclude) if exclude is not None else None

    def accept(component: Any) -> bool:
        module = type(component).__module__ or ""
        if not included.search(module):
            return False
        return excluded is None or not excluded.search(module)

    return accept
