import json
from pathlib import Path

import anyio

from typeview.services import route_types


def _write_project(root: Path) -> Path:
    """
    Minimal Next.js-style project:
      tsconfig.json            "@/*" -> "./*"
      lib/types.ts             CreateUser interface
      app/api/users/route.ts   POST reads CreateUser from "@/lib/types"
    """
    (root / "tsconfig.json").write_text(
        json.dumps({"compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["./*"]}}}),
        encoding="utf-8",
    )
    lib = root / "lib"
    lib.mkdir()
    (lib / "types.ts").write_text(
        "// Shared request types\n"
        "export interface CreateUser {\n"
        "  name: string;\n"
        "}\n",
        encoding="utf-8",
    )
    route = root / "app" / "api" / "users" / "route.ts"
    route.parent.mkdir(parents=True)
    route.write_text(
        'import { CreateUser } from "@/lib/types";\n'
        "\n"
        "export async function POST(req: Request) {\n"
        "  const body: CreateUser = await req.json();\n"
        "  return Response.json(body);\n"
        "}\n",
        encoding="utf-8",
    )
    return route


def test_lookup_follows_imported_type(tmp_path):
    route = _write_project(tmp_path)

    response = anyio.run(route_types.lookup_route_body_type, route, "POST")

    assert response.status == "imported"
    assert response.type_name == "CreateUser"
    assert response.module_path == "@/lib/types"
    assert response.resolved_file == str((tmp_path / "lib" / "types.ts").resolve())
    assert response.definition == (
        "// Shared request types\n"
        "export interface CreateUser {\n"
        "  name: string;\n"
        "}"
    )
    assert response.diagnostic is None


def test_lookup_reports_unresolvable_module(tmp_path):
    route = tmp_path / "route.ts"
    route.write_text(
        'import { Foo } from "@/nowhere";\n'
        "export async function POST(req: Request) { const body: Foo = await req.json(); }\n",
        encoding="utf-8",
    )

    response = anyio.run(route_types.lookup_route_body_type, route, "POST")

    assert response.status == "imported"
    assert response.definition is None
    assert response.resolved_file is None
    assert "@/nowhere" in response.diagnostic


def test_lookup_reports_missing_declaration_in_module(tmp_path):
    route = _write_project(tmp_path)
    (tmp_path / "lib" / "types.ts").write_text("export type Other = string;\n", encoding="utf-8")

    response = anyio.run(route_types.lookup_route_body_type, route, "POST")

    assert response.status == "imported"
    assert response.definition is None
    assert "CreateUser" in response.diagnostic


def test_lookup_local_definition(tmp_path):
    route = tmp_path / "route.ts"
    route.write_text(
        "type Input = { id: string };\n"
        "export async function POST(req: Request) { const body = (await req.json()) as Input; }\n",
        encoding="utf-8",
    )

    response = anyio.run(route_types.lookup_route_body_type, route, "POST")

    assert response.status == "local"
    assert response.definition == "type Input = { id: string };"
    assert response.path == str(route)
    assert response.function_name == "POST"


def test_lookup_not_found_carries_stage(tmp_path):
    route = tmp_path / "route.ts"
    route.write_text("export async function GET() { return new Response('ok'); }\n", encoding="utf-8")

    response = anyio.run(route_types.lookup_route_body_type, route, "POST")

    assert response.status == "not_found"
    assert response.stage == "function"
    assert response.definition is None


def test_is_tsx_path():
    assert route_types.is_tsx_path(Path("route.tsx"))
    assert not route_types.is_tsx_path(Path("route.ts"))
