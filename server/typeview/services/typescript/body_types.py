"""
Find the type of the JSON request body a route handler reads.

Resolution runs in a fixed order: index the imports, find the handler, match
the first body-reading idiom, then look the name up. An imported name always
wins over a declaration of the same name in the file.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from typeview.config import DEFAULT_FUNCTION_NAME
from typeview.services.typescript.definitions import (
    DEFAULT_EXTRACTORS,
    DefinitionExtractor,
    find_any_local_definition,
)
from typeview.services.typescript.functions import (
    find_body_type_reference,
    find_function,
    function_body_statements,
)
from typeview.services.typescript.imports import ImportClauseError, build_import_index
from typeview.services.typescript.matchers import DEFAULT_MATCHERS, BodyPatternMatcher
from typeview.services.typescript.parsing import parse_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportedType:
    type_name: str
    module_path: str


@dataclass(frozen=True)
class LocalDefinition:
    type_name: str
    definition_text: str


@dataclass(frozen=True)
class NotFound:
    # "imports" | "function" | "pattern" | "definition" | "error"
    stage: str
    type_name: Optional[str] = None
    diagnostic: Optional[str] = None


ResolvedTypeInfo = Union[ImportedType, LocalDefinition]


class BodyTypeResolver:
    def __init__(
        self,
        function_name: str = DEFAULT_FUNCTION_NAME,
        matchers: Optional[Sequence[BodyPatternMatcher]] = None,
        extractors: Optional[Sequence[DefinitionExtractor]] = None,
    ):
        self.function_name = function_name
        self.matchers = tuple(matchers) if matchers is not None else DEFAULT_MATCHERS
        self.extractors = tuple(extractors) if extractors is not None else DEFAULT_EXTRACTORS

    def resolve(
        self,
        source_text: str,
        function_name: Optional[str] = None,
        *,
        tsx: bool = False,
    ) -> Union[ResolvedTypeInfo, NotFound]:
        function_name = function_name or self.function_name
        try:
            return self._resolve(source_text, function_name, tsx)
        except ImportClauseError as e:
            logger.warning(f"Cannot resolve body type of {function_name}: {e}")
            return NotFound(stage="imports", diagnostic=str(e))
        except Exception as e:
            logger.exception(f"Body type resolution for {function_name} failed")
            return NotFound(stage="error", diagnostic=str(e))

    def _resolve(self, source_text: str, function_name: str, tsx: bool) -> Union[ResolvedTypeInfo, NotFound]:
        source = parse_source(source_text, tsx=tsx)
        import_index = build_import_index(source)

        function_node = find_function(source.root, function_name)
        if function_node is None:
            logger.debug(f"No function named {function_name}")
            return NotFound(stage="function")

        reference = find_body_type_reference(function_body_statements(function_node), self.matchers)
        if reference is None:
            logger.debug(f"No request body pattern in {function_name}")
            return NotFound(stage="pattern")

        module_path = import_index.get(reference.type_name)
        if module_path is not None:
            return ImportedType(type_name=reference.type_name, module_path=module_path)

        definition = find_any_local_definition(source, reference.type_name, self.extractors)
        if definition is not None:
            return LocalDefinition(type_name=reference.type_name, definition_text=definition)

        return NotFound(stage="definition", type_name=reference.type_name)

    def extract_definition_text(self, source_text: str, type_name: str, *, tsx: bool = False) -> Optional[str]:
        try:
            source = parse_source(source_text, tsx=tsx)
            return find_any_local_definition(source, type_name, self.extractors)
        except Exception:
            logger.exception(f'Extracting definition of "{type_name}" failed')
            return None


_default_resolver = None

def get_resolver() -> BodyTypeResolver:
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = BodyTypeResolver()
    return _default_resolver


def resolve_body_type(
    source_text: str,
    function_name: str = DEFAULT_FUNCTION_NAME,
    *,
    tsx: bool = False,
) -> Union[ResolvedTypeInfo, NotFound]:
    return get_resolver().resolve(source_text, function_name, tsx=tsx)


def extract_definition_text(source_text: str, type_name: str, *, tsx: bool = False) -> Optional[str]:
    """Pull a declaration out of a module that a route imported its type from."""
    return get_resolver().extract_definition_text(source_text, type_name, tsx=tsx)
