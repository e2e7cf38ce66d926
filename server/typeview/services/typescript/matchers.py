from typing import Optional, Protocol

from tree_sitter import Node

from typeview.services.typescript.parsing import node_text

NAMED_TYPE_NODES = {'type_identifier', 'nested_type_identifier'}


class BodyPatternMatcher(Protocol):
    """Recognizes one way of reading a JSON request body into a variable."""
    name: str

    def matches(self, declarator: Node) -> bool:
        ...

    def extract_type_name(self, declarator: Node) -> Optional[str]:
        ...


def named_type_reference(type_node: Optional[Node]) -> Optional[str]:
    """
    Return the referenced type name for `Foo`, `NS.Foo` or `Foo<T>`.

    Structural types (object literals, unions, arrays) and builtins like
    `string` have no name to look up, so they yield None.
    """
    if type_node is None:
        return None
    if type_node.type == 'type_annotation':
        if not type_node.named_children:
            return None
        type_node = type_node.named_children[0]

    if type_node.type in NAMED_TYPE_NODES:
        return node_text(type_node)
    if type_node.type == 'generic_type':
        name_node = type_node.child_by_field_name('name')
        if name_node is None and type_node.named_children:
            name_node = type_node.named_children[0]
        if name_node is not None and name_node.type in NAMED_TYPE_NODES:
            return node_text(name_node)
    return None


def awaits_json_call(expression: Optional[Node]) -> bool:
    """True for `await x.json()`, also when wrapped in parentheses."""
    while expression is not None and expression.type == 'parenthesized_expression':
        expression = expression.named_children[0] if expression.named_children else None
    if expression is None or expression.type != 'await_expression':
        return False
    if not expression.named_children:
        return False
    return node_text(expression.named_children[0]).endswith('.json()')


class AwaitReqJsonMatcher:
    """const body: Type = await req.json()"""
    name = "await-req-json"

    def matches(self, declarator: Node) -> bool:
        value = declarator.child_by_field_name('value')
        return value is not None and value.type == 'await_expression' and awaits_json_call(value)

    def extract_type_name(self, declarator: Node) -> Optional[str]:
        return named_type_reference(declarator.child_by_field_name('type'))


class TypeAssertionMatcher:
    """
    const body = await req.json() as Type
    const body = (await req.json()) as Type
    """
    name = "type-assertion"

    def matches(self, declarator: Node) -> bool:
        return self._assertion(declarator) is not None

    def extract_type_name(self, declarator: Node) -> Optional[str]:
        assertion = self._assertion(declarator)
        # `as const` leaves only the expression as a named child
        if assertion is None or len(assertion.named_children) < 2:
            return None
        return named_type_reference(assertion.named_children[-1])

    def _assertion(self, declarator: Node) -> Optional[Node]:
        value = declarator.child_by_field_name('value')
        if value is None or not value.named_children:
            return None
        if value.type == 'as_expression':
            # (await req.json()) as Type
            return value if awaits_json_call(value.named_children[0]) else None
        if value.type == 'await_expression':
            # await binds looser than `as`: await (req.json() as Type)
            inner = value.named_children[0]
            if inner.type != 'as_expression' or not inner.named_children:
                return None
            if node_text(inner.named_children[0]).endswith('.json()'):
                return inner
        return None


class ZodParseMatcher:
    """
    const body = UserSchema.parse(await req.json())

    The extracted name is the schema variable, not a type.
    """
    name = "zod-parse"

    def matches(self, declarator: Node) -> bool:
        callee = self._callee(declarator)
        if callee is None:
            return False
        method = callee.child_by_field_name('property')
        return method is not None and node_text(method) == 'parse'

    def extract_type_name(self, declarator: Node) -> Optional[str]:
        callee = self._callee(declarator)
        if callee is None:
            return None
        schema = callee.child_by_field_name('object')
        return node_text(schema) if schema is not None else None

    def _callee(self, declarator: Node) -> Optional[Node]:
        value = declarator.child_by_field_name('value')
        if value is None or value.type != 'call_expression':
            return None
        callee = value.child_by_field_name('function')
        if callee is None or callee.type != 'member_expression':
            return None
        return callee


DEFAULT_MATCHERS = (
    AwaitReqJsonMatcher(),
    TypeAssertionMatcher(),
    ZodParseMatcher(),
)
