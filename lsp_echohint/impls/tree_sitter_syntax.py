from __future__ import annotations

from loguru import logger
from tree_sitter import Language, Node, Parser, Tree

from lsp_echohint.domain import BufferId
from lsp_echohint.interfaces import isyntaxtree


class TreeSitterSyntaxTree(isyntaxtree.ISyntaxTree):
    def __init__(self, language: Language) -> None:
        self.parser = Parser(language)
        self.trees: dict[BufferId, Tree] = {}

    def update(self, buffer_id: BufferId, source: str) -> None:
        self.trees[buffer_id] = self.parser.parse(source.encode("utf-8"))

    def forget_buffer(self, buffer_id: BufferId) -> None:
        self.trees.pop(buffer_id, None)

    def get_node(self, buffer_id: BufferId, row: int, column: int) -> Node | None:
        tree = self.trees.get(buffer_id, None)
        if tree is None:
            return None

        point = (row, column)
        return tree.root_node.named_descendant_for_point_range(point, point)

    def node_text(self, buffer_id: BufferId, row: int, column: int) -> str | None:
        node = self.get_node(buffer_id, row, column)
        if node is None or node.text is None:
            logger.trace(f"No syntax node at {row}:{column} in buffer {buffer_id}")
            return None
        return node.text.decode("utf-8", errors="replace")


__all__ = ["TreeSitterSyntaxTree"]
