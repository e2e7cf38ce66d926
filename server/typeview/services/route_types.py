import logging
from pathlib import Path
from typing import Union

import anyio

from typeview.config import DEFAULT_FUNCTION_NAME, TSX_SUFFIXES
from typeview.models import ResolveResponse, RouteTypeResponse
from typeview.services.module_resolver import resolve_module_path
from typeview.services.typescript.body_types import (
    ImportedType,
    LocalDefinition,
    NotFound,
    ResolvedTypeInfo,
    extract_definition_text,
    resolve_body_type,
)

logger = logging.getLogger(__name__)


def is_tsx_path(path: Path) -> bool:
    return path.suffix.lower() in TSX_SUFFIXES


def to_response(result: Union[ResolvedTypeInfo, NotFound], **extra) -> ResolveResponse:
    """Convert an engine result into the API shape."""
    model = RouteTypeResponse if "path" in extra else ResolveResponse
    if isinstance(result, ImportedType):
        return model(status="imported", type_name=result.type_name, module_path=result.module_path, **extra)
    if isinstance(result, LocalDefinition):
        return model(status="local", type_name=result.type_name, definition=result.definition_text, **extra)
    return model(
        status="not_found",
        type_name=result.type_name,
        stage=result.stage,
        diagnostic=result.diagnostic,
        **extra,
    )


async def lookup_route_body_type(
    route_file: Path,
    function_name: str = DEFAULT_FUNCTION_NAME,
) -> RouteTypeResponse:
    """
    Resolve the request body type of a handler in `route_file`.

    Imported types are followed into the declaring module so the response
    always carries the definition text when it can be found.
    """
    source_text = await anyio.Path(route_file).read_text(encoding="utf-8")
    result = resolve_body_type(source_text, function_name, tsx=is_tsx_path(route_file))
    response = to_response(result, path=str(route_file), function_name=function_name)

    if not isinstance(result, ImportedType):
        return response

    module_file = resolve_module_path(result.module_path, route_file)
    if module_file is None:
        logger.info(f"Could not resolve module {result.module_path!r} imported by {route_file}")
        response.diagnostic = f'Could not resolve module "{result.module_path}"'
        return response

    module_source = await anyio.Path(module_file).read_text(encoding="utf-8")
    response.resolved_file = str(module_file)
    response.definition = extract_definition_text(
        module_source, result.type_name, tsx=is_tsx_path(module_file)
    )
    if response.definition is None:
        logger.info(f'"{result.type_name}" is not declared in {module_file}')
        response.diagnostic = f'"{result.type_name}" is not declared in {module_file}'
    return response
