from fastapi import APIRouter, HTTPException, Query
from pathlib import Path

from typeview.config import DEFAULT_FUNCTION_NAME, SUPPORTED_FUNCTION_NAMES
from typeview.models import (
    DefinitionRequest,
    DefinitionResponse,
    ResolveRequest,
    ResolveResponse,
    RouteTypeResponse,
)
from typeview.services import route_types
from typeview.services.typescript import body_types

router = APIRouter(prefix="/api/types", tags=["types"])

# Relative lookup paths are taken from the directory the server was started in.
ROOT_PATH = Path.cwd()


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_source(request: ResolveRequest):
    """
    Resolve the request body type of a handler in the posted source text.
    """
    result = body_types.resolve_body_type(request.source, request.function_name, tsx=request.tsx)
    return route_types.to_response(result)


@router.post("/definition", response_model=DefinitionResponse)
async def extract_definition(request: DefinitionRequest):
    """
    Extract the declaration of `type_name` from the posted source text.
    """
    definition = body_types.extract_definition_text(request.source, request.type_name, tsx=request.tsx)
    return DefinitionResponse(type_name=request.type_name, found=definition is not None, definition=definition)


@router.get("/lookup", response_model=RouteTypeResponse)
async def lookup_route_file(
    path: str = Query(..., description="Route file, absolute or relative to the server root"),
    function_name: str = Query(DEFAULT_FUNCTION_NAME, description="Handler to inspect"),
):
    """
    Resolve the request body type of a handler in a route file on disk,
    following imported types into their modules.
    """
    if function_name not in SUPPORTED_FUNCTION_NAMES:
        supported = ", ".join(sorted(SUPPORTED_FUNCTION_NAMES))
        raise HTTPException(status_code=400, detail=f"Unsupported function {function_name!r}; expected one of {supported}")

    file_path = Path(path)
    if not file_path.is_absolute():
        file_path = ROOT_PATH / file_path

    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    if not file_path.is_file():
        raise HTTPException(status_code=400, detail="Path is not a file")

    try:
        return await route_types.lookup_route_body_type(file_path.resolve(), function_name)
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=500, detail=f"Failed to read file: {str(e)}")
