# src/repodigest/core/tree.py
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from repodigest import config

logger = logging.getLogger(__name__)


@dataclass
class TreeNode:
    name: str
    kind: str  # "file" or "folder"
    path: Path
    depth: int
    children: List["TreeNode"] = field(default_factory=list)


def _is_tree_ignored(name: str) -> bool:
    return name in config.TREE_IGNORED_NAMES or name.endswith(config.TREE_IGNORED_SUFFIXES)


def build_file_tree(root: Path, max_depth: int = config.DEFAULT_TREE_DEPTH, depth: int = 0) -> List[TreeNode]:
    """
    Builds a nested display tree of `root`. Folders deeper than max_depth
    are listed but not expanded.
    """
    nodes: List[TreeNode] = []
    try:
        items = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.warning("Cannot list %s: %s", root, e)
        return nodes

    for item in items:
        if _is_tree_ignored(item.name):
            continue
        is_dir = item.is_dir()
        node = TreeNode(name=item.name, kind="folder" if is_dir else "file", path=item, depth=depth)
        if is_dir and depth < max_depth:
            node.children = build_file_tree(item, max_depth, depth + 1)
        nodes.append(node)

    return nodes


def render_file_tree(nodes: List[TreeNode], root_name: str) -> str:
    """Renders display nodes as an indented tree; folders end with '/'."""
    lines = [f"{root_name}/"]

    def _render(children: List[TreeNode], prefix: str):
        for i, node in enumerate(children):
            last = i == len(children) - 1
            label = f"{node.name}/" if node.kind == "folder" else node.name
            lines.append(f"{prefix}{'└── ' if last else '├── '}{label}")
            if node.children:
                _render(node.children, prefix + ("    " if last else "│   "))

    _render(nodes, "")
    return "\n".join(lines) + "\n"
