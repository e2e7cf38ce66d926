import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from typeview.config import (
    ASSET_EXTENSIONS,
    TS_INDEX_FILES,
    TS_MODULE_EXTENSIONS,
    TSCONFIG_CANDIDATE_NAMES,
)

logger = logging.getLogger(__name__)

# Strings are matched first so `//` inside "https://..." survives.
_TSCONFIG_NOISE = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/|,(?=\s*[}\]])', re.DOTALL)


def _to_json(tsconfig_text: str) -> str:
    """Drop the comments and trailing commas tsc tolerates but json does not."""
    return _TSCONFIG_NOISE.sub(lambda m: m.group(0) if m.group(0).startswith('"') else "", tsconfig_text)


def find_nearest_tsconfig(importing_file: Path) -> Optional[Path]:
    """The closest tsconfig in the importing file's directory or any parent."""
    directory = importing_file.parent.resolve()
    for parent in [directory, *directory.parents]:
        for name in TSCONFIG_CANDIDATE_NAMES:
            candidate = parent / name
            if candidate.is_file():
                return candidate
    return None


def read_path_aliases(tsconfig: Path) -> Tuple[Path, Dict[str, List[str]]]:
    """
    Return the directory aliases are relative to and `compilerOptions.paths`.

    A tsconfig that cannot be read or parsed yields no aliases.
    """
    root = tsconfig.parent.resolve()
    try:
        data = json.loads(_to_json(tsconfig.read_text(encoding="utf-8")))
    except (OSError, ValueError) as e:
        logger.info(f"Ignoring unreadable tsconfig {tsconfig}: {e}")
        return root, {}

    compiler_options = data.get("compilerOptions") if isinstance(data, dict) else None
    if not isinstance(compiler_options, dict):
        return root, {}
    base_url = compiler_options.get("baseUrl")
    if isinstance(base_url, str) and base_url.strip():
        root = (root / base_url).resolve()

    paths = compiler_options.get("paths")
    if not isinstance(paths, dict):
        return root, {}

    aliases: Dict[str, List[str]] = {}
    for alias, targets in paths.items():
        if isinstance(targets, str):
            aliases[alias] = [targets]
        elif isinstance(targets, list):
            aliases[alias] = [t for t in targets if isinstance(t, str)]
    return root, aliases


def expand_alias(import_path: str, root: Path, aliases: Dict[str, List[str]]) -> List[Path]:
    """
    Candidate paths for an aliased specifier, in tsconfig order.

    "@/*": ["./src/*"] turns "@/lib/types" into <root>/src/lib/types. An alias
    without `*` only matches the specifier exactly.
    """
    candidates: List[Path] = []
    for alias, targets in aliases.items():
        prefix, star, suffix = alias.partition("*")
        if not star:
            if import_path == alias:
                candidates.extend((root / target).resolve() for target in targets)
            continue
        if not import_path.startswith(prefix) or not import_path.endswith(suffix):
            continue
        rest = import_path[len(prefix):len(import_path) - len(suffix)]
        for target in targets:
            if "*" in target:
                candidates.append((root / target.replace("*", rest, 1)).resolve())
            else:
                candidates.append((root / target / rest).resolve())
    return candidates


def resolve_to_existing_ts_module(candidate: Path) -> Optional[Path]:
    resolved = candidate.resolve()
    if resolved.is_file():
        return resolved

    if resolved.suffix and resolved.suffix in ASSET_EXTENSIONS:
        return None

    # "./types" -> types.ts, "./types.schema" -> types.schema.ts
    for ext in TS_MODULE_EXTENSIONS:
        p = resolved.parent / f"{resolved.name}{ext}"
        if p.is_file():
            return p

    for index_name in TS_INDEX_FILES:
        p = resolved / index_name
        if p.is_file():
            return p

    return None


def resolve_module_path(import_path: str, importing_file: Path) -> Optional[Path]:
    """
    Find the TypeScript file a module specifier refers to, or None.

    Relative specifiers are resolved against the importing file. Anything else
    goes through the `paths` of the nearest tsconfig. Packages from
    node_modules are not followed.
    """
    if import_path.startswith("."):
        return resolve_to_existing_ts_module(importing_file.parent / import_path)

    tsconfig = find_nearest_tsconfig(importing_file)
    if tsconfig is None:
        logger.info(f"No tsconfig found above {importing_file} to resolve {import_path!r}")
        return None

    root, aliases = read_path_aliases(tsconfig)
    for candidate in expand_alias(import_path, root, aliases):
        resolved = resolve_to_existing_ts_module(candidate)
        if resolved is not None:
            return resolved

    return None
