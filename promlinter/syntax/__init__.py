"""Go syntax frontend: tree-sitter parsing into a typed node model."""

from .nodes import File, Ident, Node, walk
from .parser import GoParser

__all__ = ["File", "GoParser", "Ident", "Node", "walk"]
