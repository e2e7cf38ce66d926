from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

# Load TypeScript and TSX grammars
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

VARIABLE_DECLARATION_TYPES = {'lexical_declaration', 'variable_declaration'}


@dataclass(frozen=True)
class SourceTree:
    """A parsed source file. Built once per call and never shared."""
    tree: Tree
    content: bytes

    @property
    def root(self) -> Node:
        return self.tree.root_node


def parse_source(source_text: str, tsx: bool = False) -> SourceTree:
    # A fresh parser per call keeps concurrent resolutions independent.
    parser = Parser(TSX_LANGUAGE if tsx else TYPESCRIPT_LANGUAGE)
    content = source_text.encode('utf-8')
    return SourceTree(tree=parser.parse(content), content=content)


def node_text(node: Node) -> str:
    return node.text.decode('utf-8')


def walk(node: Node) -> Iterator[Node]:
    """Yield `node` and all of its named descendants in document order."""
    # Explicit stack; generated sources nest deeper than the recursion limit.
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.named_children))


def unwrap_export(node: Node) -> Node:
    # export interface Foo {} / export const Bar = ...
    if node.type == 'export_statement':
        declaration = node.child_by_field_name('declaration')
        if declaration is not None:
            return declaration
    return node


def top_level_declarations(root: Node) -> Iterator[Tuple[Node, Node]]:
    """Yield (statement, declaration) pairs for each top-level statement."""
    for statement in root.named_children:
        if statement.type == 'comment':
            continue
        yield statement, unwrap_export(statement)


def declared_name(declaration: Node) -> Optional[str]:
    name_node = declaration.child_by_field_name('name')
    if name_node is None:
        return None
    return node_text(name_node)


def first_declarator(declaration: Node) -> Optional[Node]:
    if declaration.type not in VARIABLE_DECLARATION_TYPES:
        return None
    for child in declaration.named_children:
        if child.type == 'variable_declarator':
            return child
    return None


def _leading_comment_start(node: Node) -> int:
    start = node.start_byte
    prev = node.prev_sibling
    while prev is not None and prev.type == 'comment':
        before = prev.prev_sibling
        # `foo(); // note` belongs to the statement before it
        if before is not None and before.type != 'comment' and before.end_point.row == prev.start_point.row:
            break
        start = prev.start_byte
        prev = before
    return start


def statement_text(node: Node, content: bytes) -> str:
    """Source text of a statement including the comment block directly above it."""
    start = _leading_comment_start(node)
    return content[start:node.end_byte].decode('utf-8').strip()
