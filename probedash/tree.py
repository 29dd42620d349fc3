"""Forest reconstruction for parent-referenced snapshot records.

Fibers and actors both arrive as flat lists where each record names its
parent. ``render_forest`` rebuilds the forest and turns it into box-drawing
lines ready for a single-selection list::

    ├─#1   Running
    │ └─#2 Suspended
    └─#4   Done
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Protocol, TypeVar

BRANCH = "├─"
CORNER = "└─"
PIPE = "│ "
BLANK = "  "
MARKER = "#"


class TreeNode(Protocol):
    @property
    def id(self) -> int: ...

    @property
    def parent_id(self) -> int | None: ...

    @property
    def tag(self) -> str: ...


N = TypeVar("N", bound=TreeNode)


def _cycle_root(start: int, parents: dict[int, int | None]) -> int:
    """Follow parent links from ``start`` until one repeats; return the
    smallest id on the loop."""
    seen: dict[int, int] = {}
    path: list[int] = []
    node_id = start
    while node_id not in seen:
        seen[node_id] = len(path)
        path.append(node_id)
        node_id = parents[node_id]
    return min(path[seen[node_id]:])


def _find_roots(nodes: dict[int, N]) -> list[int]:
    parents = {node_id: node.parent_id for node_id, node in nodes.items()}
    roots = [
        node_id for node_id, parent_id in parents.items()
        if parent_id is None or parent_id not in nodes
    ]

    children: dict[int, list[int]] = defaultdict(list)
    for node_id, parent_id in parents.items():
        if parent_id is not None and parent_id in nodes:
            children[parent_id].append(node_id)

    reached: set[int] = set()

    def reach(root_id: int) -> None:
        stack = [root_id]
        while stack:
            node_id = stack.pop()
            if node_id in reached:
                continue
            reached.add(node_id)
            stack.extend(children.get(node_id, ()))

    for root_id in roots:
        reach(root_id)

    # Whatever is still unreached hangs off a parent loop.
    for node_id in sorted(nodes):
        if node_id in reached:
            continue
        breaker = _cycle_root(node_id, parents)
        roots.append(breaker)
        reach(breaker)

    return sorted(roots)


def render_forest(nodes: Iterable[N], with_status: bool = False) -> list[tuple[str, N]]:
    """Render ``nodes`` as a depth-first, pre-order list of ``(label, node)``.

    Roots and siblings are ordered by ascending id, so the result does not
    depend on input order. Nodes whose parent is missing from the snapshot
    become roots. A parent loop is cut at its smallest id, which is shown as
    a root.

    With ``with_status`` each label ends with the node's status, starting in
    the same column on every line.
    """
    by_id: dict[int, N] = {node.id: node for node in nodes}
    roots = _find_roots(by_id)
    root_set = set(roots)

    children: dict[int, list[int]] = defaultdict(list)
    for node_id, node in by_id.items():
        parent_id = node.parent_id
        if node_id in root_set or parent_id is None:
            continue
        children[parent_id].append(node_id)
    for siblings in children.values():
        siblings.sort()

    rendered: list[tuple[str, N]] = []
    stack: list[tuple[int, tuple[bool, ...], bool]] = [
        (root_id, (), index == len(roots) - 1)
        for index, root_id in enumerate(roots)
    ]
    stack.reverse()
    while stack:
        node_id, trail, is_last = stack.pop()
        node = by_id[node_id]
        prefix = "".join(BLANK if last else PIPE for last in trail)
        connector = CORNER if is_last else BRANCH
        rendered.append((f"{prefix}{connector}{MARKER}{node.tag}", node))

        siblings = children.get(node_id, [])
        for index in reversed(range(len(siblings))):
            stack.append((siblings[index], trail + (is_last,), index == len(siblings) - 1))

    if not with_status or not rendered:
        return rendered

    width = max(len(left) for left, _ in rendered) + 1
    return [(left.ljust(width) + node.status.value, node) for left, node in rendered]
