import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from tree_sitter import Node

from typeview.services.typescript.matchers import BodyPatternMatcher
from typeview.services.typescript.parsing import (
    VARIABLE_DECLARATION_TYPES,
    declared_name,
    first_declarator,
    top_level_declarations,
    walk,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BodyTypeReference:
    type_name: str
    matcher: str


def find_function(root: Node, function_name: str) -> Optional[Node]:
    """
    Return the first top-level `function NAME() {}` declaration, exported or not.

    Arrow functions bound to a const are not route handlers by convention and
    are ignored.
    """
    for _, declaration in top_level_declarations(root):
        if declaration.type != 'function_declaration':
            continue
        if declared_name(declaration) == function_name:
            return declaration
    return None


def function_body_statements(function_node: Node) -> List[Node]:
    body = function_node.child_by_field_name('body')
    if body is None:
        return []
    return [child for child in body.named_children if child.type != 'comment']


def iter_variable_declarators(statements: Sequence[Node]) -> Iterator[Node]:
    """
    Yield the first declarator of every variable declaration in the statements,
    descending into nested blocks (try/catch, if, callbacks) in document order.
    """
    for statement in statements:
        for node in walk(statement):
            if node.type not in VARIABLE_DECLARATION_TYPES:
                continue
            declarator = first_declarator(node)
            if declarator is not None:
                yield declarator


def find_body_type_reference(
    statements: Sequence[Node],
    matchers: Sequence[BodyPatternMatcher],
) -> Optional[BodyTypeReference]:
    """First declaration that any matcher can name wins for the whole body."""
    for declarator in iter_variable_declarators(statements):
        for matcher in matchers:
            if not matcher.matches(declarator):
                continue
            type_name = matcher.extract_type_name(declarator)
            if type_name:
                logger.debug(f'Found type "{type_name}" using {matcher.name} pattern')
                return BodyTypeReference(type_name=type_name, matcher=matcher.name)
    return None


def find_function_body_type(
    root: Node,
    function_name: str,
    matchers: Sequence[BodyPatternMatcher],
) -> Optional[BodyTypeReference]:
    function_node = find_function(root, function_name)
    if function_node is None:
        return None
    return find_body_type_reference(function_body_statements(function_node), matchers)
