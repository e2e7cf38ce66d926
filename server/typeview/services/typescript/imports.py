import logging
from dataclasses import dataclass
from typing import Dict, Iterator

from tree_sitter import Node

from typeview.services.typescript.parsing import SourceTree, node_text

logger = logging.getLogger(__name__)


class ImportClauseError(Exception):
    """Raised when an import statement does not say which names it binds."""
    def __init__(self, module_path: str, reason: str):
        self.module_path = module_path
        self.reason = reason
        super().__init__(
            f'{reason}: "{module_path}". '
            f'Please use named imports (import {{ Type }} from "{module_path}") '
            f'or default imports (import Type from "{module_path}").'
        )


@dataclass(frozen=True)
class ImportBinding:
    local_name: str
    module_path: str


def iter_import_bindings(root: Node) -> Iterator[ImportBinding]:
    """
    Yield the bindings of every top-level import statement in document order.

    Imports inside `declare module "x" { ... }` blocks describe another module
    and are not bindings of this file.
    """
    for node in root.named_children:
        if node.type == 'import_statement':
            yield from _statement_bindings(node)


def _statement_bindings(node: Node) -> Iterator[ImportBinding]:
    require_clause = None
    clause = None
    for child in node.named_children:
        if child.type == 'import_require_clause':
            require_clause = child
        elif child.type == 'import_clause':
            clause = child

    if require_clause is not None:
        # import fs = require("fs") is not an ES import; nothing to index.
        logger.debug(f"Skipping require-style import: {node_text(node)}")
        return

    source = node.child_by_field_name('source')
    if source is None:
        return
    module_path = node_text(source).strip("'\"")

    if clause is None:
        raise ImportClauseError(module_path, "Import statement without import clause found")

    for child in clause.named_children:
        if child.type == 'identifier':
            # import D from "mod"
            yield ImportBinding(node_text(child), module_path)
        elif child.type == 'named_imports':
            # import { A, B as C } from "mod"
            for specifier in child.named_children:
                if specifier.type != 'import_specifier':
                    continue
                local = specifier.child_by_field_name('alias')
                if local is None:
                    local = specifier.child_by_field_name('name')
                if local is not None:
                    yield ImportBinding(node_text(local), module_path)
        elif child.type == 'namespace_import':
            raise ImportClauseError(module_path, "Namespace import is not supported")


def build_import_index(source: SourceTree) -> Dict[str, str]:
    """
    Map every locally bound import name to its module specifier.

    Names imported more than once keep the module of the last import seen.
    Raises ImportClauseError for side-effect-only and namespace imports.
    """
    index: Dict[str, str] = {}
    for binding in iter_import_bindings(source.root):
        index[binding.local_name] = binding.module_path
    return index
