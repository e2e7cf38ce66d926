import logging
from typing import Optional, Protocol, Sequence

from tree_sitter import Node

from typeview.services.typescript.parsing import (
    SourceTree,
    declared_name,
    first_declarator,
    node_text,
    statement_text,
    unwrap_export,
    walk,
)

logger = logging.getLogger(__name__)


class DefinitionExtractor(Protocol):
    """Finds and renders one kind of top-level declaration by name."""
    name: str

    def can_handle(self, node: Node, type_name: str) -> bool:
        ...

    def extract(self, node: Node, content: bytes) -> str:
        ...


class InterfaceTypeExtractor:
    """interface Foo {} / type Foo = ..."""
    name = "interface-or-type-alias"

    def can_handle(self, node: Node, type_name: str) -> bool:
        declaration = unwrap_export(node)
        return (
            declaration.type in {'interface_declaration', 'type_alias_declaration'}
            and declared_name(declaration) == type_name
        )

    def extract(self, node: Node, content: bytes) -> str:
        return statement_text(node, content)


class VariableDeclarationExtractor:
    """const UserSchema = z.object({...}), matched by the bound name only."""
    name = "variable-declaration"

    def can_handle(self, node: Node, type_name: str) -> bool:
        declarator = first_declarator(unwrap_export(node))
        if declarator is None:
            return False
        name_node = declarator.child_by_field_name('name')
        return name_node is not None and name_node.type == 'identifier' and node_text(name_node) == type_name

    def extract(self, node: Node, content: bytes) -> str:
        return statement_text(node, content)


DEFAULT_EXTRACTORS = (
    InterfaceTypeExtractor(),
    VariableDeclarationExtractor(),
)


def find_local_definition(
    source: SourceTree,
    type_name: str,
    extractors: Sequence[DefinitionExtractor] = DEFAULT_EXTRACTORS,
) -> Optional[str]:
    for statement in source.root.named_children:
        for extractor in extractors:
            if extractor.can_handle(statement, type_name):
                logger.debug(f'Found local "{type_name}" with {extractor.name}')
                return extractor.extract(statement, source.content)
    return None


def _find_declaration_anywhere(source: SourceTree, node_type: str, type_name: str) -> Optional[str]:
    # Searches the whole tree, so namespaces and `declare module` blocks count too.
    for node in walk(source.root):
        if node.type == node_type and declared_name(node) == type_name:
            parent = node.parent
            statement = parent if parent is not None and parent.type == 'export_statement' else node
            return statement_text(statement, source.content)
    return None


def find_local_type_alias(source: SourceTree, type_name: str) -> Optional[str]:
    return _find_declaration_anywhere(source, 'type_alias_declaration', type_name)


def find_local_interface(source: SourceTree, type_name: str) -> Optional[str]:
    return _find_declaration_anywhere(source, 'interface_declaration', type_name)


def find_any_local_definition(
    source: SourceTree,
    type_name: str,
    extractors: Sequence[DefinitionExtractor] = DEFAULT_EXTRACTORS,
) -> Optional[str]:
    """
    Look for `type_name` among the file's own declarations.

    The extractor list runs first over top-level statements. The type alias and
    interface passes only run when it finds nothing.
    """
    definition = find_local_definition(source, type_name, extractors)
    if definition:
        return definition

    definition = find_local_type_alias(source, type_name)
    if definition:
        return definition

    definition = find_local_interface(source, type_name)
    if definition:
        return definition

    logger.debug(f'Type "{type_name}" not found in same file')
    return None
