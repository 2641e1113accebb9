# src/repodigest/core/languages.py
from pathlib import PurePath
from typing import Iterable, List

from repodigest.core.tree import TreeNode

LANGUAGE_BY_EXTENSION = {
    ".html": "HTML", ".css": "CSS", ".js": "JavaScript", ".ts": "TypeScript",
    ".jsx": "JavaScript (React)", ".tsx": "TypeScript (React)", ".py": "Python",
    ".java": "Java", ".cpp": "C++", ".c": "C", ".cs": "C#", ".go": "Go",
    ".rs": "Rust", ".rb": "Ruby", ".php": "PHP", ".kt": "Kotlin", ".swift": "Swift",
    ".scala": "Scala", ".sh": "Shell", ".json": "JSON", ".yaml": "YAML",
    ".yml": "YAML", ".xml": "XML", ".toml": "TOML", ".dockerfile": "Dockerfile",
    ".hs": "Haskell", ".erl": "Erlang", ".ex": "Elixir", ".r": "R", ".jl": "Julia",
    ".sql": "SQL", ".md": "Markdown",
}


def _language_for(name: str):
    return LANGUAGE_BY_EXTENSION.get(PurePath(name).suffix.lower())


def detect_languages(nodes: Iterable[TreeNode]) -> List[str]:
    """Languages present in a display tree, in first-seen order."""
    found: List[str] = []

    def _visit(node: TreeNode):
        if node.kind == "file":
            language = _language_for(node.name)
            if language and language not in found:
                found.append(language)
        for child in node.children:
            _visit(child)

    for node in nodes:
        _visit(node)
    return found

