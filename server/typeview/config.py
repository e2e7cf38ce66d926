from typing import Set, Tuple

# Handler the engine inspects when the caller does not name one.
DEFAULT_FUNCTION_NAME: str = "POST"

# HTTP method handlers the host API will accept. The engine itself takes any name.
SUPPORTED_FUNCTION_NAMES: Set[str] = {
    'GET',
    'POST',
    'PUT',
    'PATCH',
    'DELETE',
}

TSCONFIG_CANDIDATE_NAMES: Tuple[str, ...] = (
    "tsconfig.json",
    "tsconfig.app.json",
    "tsconfig.base.json",
)

# Tried in order when a module specifier has no extension.
TS_MODULE_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx", ".d.ts")
TS_INDEX_FILES: Tuple[str, ...] = ("index.ts", "index.tsx")

TSX_SUFFIXES: Set[str] = {'.tsx', '.jsx'}

ASSET_EXTENSIONS: Set[str] = {
    '.css', '.scss', '.sass', '.less', '.styl', '.json',
    '.png', '.jpg', '.jpeg', '.gif', '.svg', '.ico', '.webp', '.bmp', '.avif',
    '.md', '.txt'
}
