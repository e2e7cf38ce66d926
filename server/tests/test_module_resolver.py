import json
from pathlib import Path

from typeview.services.module_resolver import (
    expand_alias,
    find_nearest_tsconfig,
    read_path_aliases,
    resolve_module_path,
)


def test_find_nearest_tsconfig(tmp_path):
    # Layout:
    #   tsconfig.json
    #   app/
    #       tsconfig.app.json
    #       api/route.ts
    root_tsconfig = tmp_path / "tsconfig.json"
    app = tmp_path / "app"
    (app / "api").mkdir(parents=True)
    app_tsconfig = app / "tsconfig.app.json"

    root_tsconfig.write_text("{}", encoding="utf-8")
    app_tsconfig.write_text("{}", encoding="utf-8")

    assert find_nearest_tsconfig(app / "api" / "route.ts") == app_tsconfig.resolve()
    assert find_nearest_tsconfig(tmp_path / "route.ts") == root_tsconfig.resolve()


def test_read_path_aliases_accepts_comments_and_trailing_commas(tmp_path):
    tsconfig_path = tmp_path / "tsconfig.json"
    tsconfig_path.write_text(
        """
        {
          // Next.js default alias
          "compilerOptions": {
            "baseUrl": ".",
            /* aliases */
            "paths": {
              "@/*": ["./src/*"],
              "@core": ["src/core/index.ts"],
              "~/*": "./lib/*",
              "docs/*": ["https://example.com/*"],
            },
          }
        }
        """,
        encoding="utf-8",
    )

    root, aliases = read_path_aliases(tsconfig_path)

    assert root == tmp_path.resolve()
    assert aliases == {
        "@/*": ["./src/*"],
        "@core": ["src/core/index.ts"],
        "~/*": ["./lib/*"],
        "docs/*": ["https://example.com/*"],
    }


def test_read_path_aliases_uses_base_url(tmp_path):
    tsconfig_path = tmp_path / "tsconfig.json"
    tsconfig_path.write_text(json.dumps({"compilerOptions": {"baseUrl": "src"}}), encoding="utf-8")

    root, aliases = read_path_aliases(tsconfig_path)

    assert root == (tmp_path / "src").resolve()
    assert aliases == {}


def test_read_path_aliases_tolerates_broken_files(tmp_path):
    tsconfig_path = tmp_path / "tsconfig.json"
    tsconfig_path.write_text("{ not json", encoding="utf-8")

    root, aliases = read_path_aliases(tsconfig_path)

    assert root == tmp_path.resolve()
    assert aliases == {}


def test_expand_alias(tmp_path):
    aliases = {
        "@/*": ["./src/*"],
        "@core": ["src/core/index.ts"],
        "~/*": ["./lib"],
    }

    assert expand_alias("@/lib/types", tmp_path, aliases) == [(tmp_path / "src/lib/types").resolve()]
    assert expand_alias("@core", tmp_path, aliases) == [(tmp_path / "src/core/index.ts").resolve()]
    assert expand_alias("@core/extra", tmp_path, aliases) == []
    assert expand_alias("~/types", tmp_path, aliases) == [(tmp_path / "lib/types").resolve()]
    assert expand_alias("react", tmp_path, aliases) == []


def test_resolve_relative_specifiers(tmp_path):
    route = tmp_path / "app" / "api" / "users" / "route.ts"
    route.parent.mkdir(parents=True)
    route.write_text("", encoding="utf-8")
    types_file = route.parent / "types.ts"
    types_file.write_text("export interface CreateUser {}", encoding="utf-8")
    shared = tmp_path / "app" / "shared"
    shared.mkdir()
    (shared / "index.ts").write_text("", encoding="utf-8")

    assert resolve_module_path("./types", route) == types_file.resolve()
    assert resolve_module_path("../../shared", route) == (shared / "index.ts").resolve()
    assert resolve_module_path("./missing", route) is None
    assert resolve_module_path("./styles.css", route) is None


def test_resolve_aliased_specifiers(tmp_path):
    tsconfig = {"compilerOptions": {"paths": {"@/*": ["./*"]}}}
    (tmp_path / "tsconfig.json").write_text(json.dumps(tsconfig), encoding="utf-8")
    lib = tmp_path / "lib"
    lib.mkdir()
    types_file = lib / "types.d.ts"
    types_file.write_text("export type Id = string;", encoding="utf-8")
    route = tmp_path / "app" / "api" / "route.ts"
    route.parent.mkdir(parents=True)
    route.write_text("", encoding="utf-8")

    assert resolve_module_path("@/lib/types", route) == types_file.resolve()
    # Bare package names are not followed into node_modules.
    assert resolve_module_path("zod", route) is None


def test_resolve_without_tsconfig(tmp_path: Path):
    route = tmp_path / "route.ts"
    route.write_text("", encoding="utf-8")

    assert resolve_module_path("@/lib/types", route) is None
