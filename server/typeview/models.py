from typing import Optional
from pydantic import BaseModel

from typeview.config import DEFAULT_FUNCTION_NAME

class ResolveRequest(BaseModel):
    source: str
    function_name: str = DEFAULT_FUNCTION_NAME
    # Parse with the TSX grammar (route.tsx and friends)
    tsx: bool = False

class ResolveResponse(BaseModel):
    status: str  # "imported", "local", "not_found"
    type_name: Optional[str] = None
    module_path: Optional[str] = None
    definition: Optional[str] = None
    # Where resolution stopped when nothing was found
    stage: Optional[str] = None
    diagnostic: Optional[str] = None

class DefinitionRequest(BaseModel):
    source: str
    type_name: str
    tsx: bool = False

class DefinitionResponse(BaseModel):
    type_name: str
    found: bool = False
    definition: Optional[str] = None

class RouteTypeResponse(ResolveResponse):
    path: str
    function_name: str = DEFAULT_FUNCTION_NAME
    # File the imported module specifier resolved to, when it did
    resolved_file: Optional[str] = None
