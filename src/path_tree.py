"""
Field whitelist trees for sanitising tweet JSON
Turns dotted field paths like "user.screen_name" into a nested keep/recurse tree
"""
import re
from typing import Dict, Iterable, List, Union


class Leaf:
    """Keep this field and everything beneath it, unfiltered"""

    __slots__ = ()

    def __repr__(self):
        return "LEAF"


LEAF = Leaf()


class Node:
    """Keep this field, but filter its value with a nested tree"""

    def __init__(self, children: Dict[str, "Entry"] = None):
        self.children: Dict[str, Entry] = children if children is not None else {}

    def __eq__(self, other):
        return isinstance(other, Node) and self.children == other.children

    def __repr__(self):
        return f"Node({self.children!r})"


Entry = Union[Leaf, Node]
PathTree = Dict[str, Entry]

MEDIA_PATHS = ("entities.media", "extended_entities")

_FIELD_SEPARATORS = re.compile(r"[,\s]+")


def build_path_tree(paths: Iterable[str]) -> PathTree:
    """
    Build the nested keep-tree for a list of dotted field paths

    A field named both bare ("user") and nested ("user.screen_name") always
    ends up as a Node: the nested form wins whatever the order, so listing a
    field twice never widens it back to "keep everything".

    Args:
        paths: Dotted field paths, e.g. ["id_str", "user.screen_name"]

    Returns:
        Mapping of field name to LEAF or Node
    """
    tree: PathTree = {}
    for path in paths:
        segments = [s.strip() for s in path.split(".") if s.strip()]
        if segments:
            _register(tree, segments)
    return tree


def _register(tree: PathTree, segments: List[str]):
    head, rest = segments[0], segments[1:]
    existing = tree.get(head)

    if not rest:
        # A bare field never demotes an existing Node
        if existing is None:
            tree[head] = LEAF
        return

    if not isinstance(existing, Node):
        existing = Node()
        tree[head] = existing
    _register(existing.children, rest)


def parse_field_list(text: str) -> List[str]:
    """Split a typed-in field list on newlines, commas and spaces"""
    if not text:
        return []
    return [f for f in _FIELD_SEPARATORS.split(text) if f]


def without_media(paths: Iterable[str]) -> List[str]:
    """Drop image/video fields from a path list (the "skip media" option)"""
    kept = []
    for path in paths:
        stripped = path.strip()
        if any(stripped == m or stripped.startswith(m + ".") for m in MEDIA_PATHS):
            continue
        kept.append(path)
    return kept


def render_tree(tree: PathTree, indent_level: int = 0) -> str:
    """
    Render a tree as an indented "- field" listing for debug output

    Args:
        tree: Tree from build_path_tree
        indent_level: How deeply we've recursed

    Returns:
        One line per field, two spaces of indent per level
    """
    lines = []
    for field, entry in tree.items():
        lines.append(f"{'  ' * indent_level}- {field}\n")
        if isinstance(entry, Node):
            lines.append(render_tree(entry.children, indent_level + 1))
    return "".join(lines)
