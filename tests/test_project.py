"""Tests for writing a generated project to disk."""

import json

import pytest

from openapi2mcp.codegen import generate_files
from openapi2mcp.config import OAuth2Info
from openapi2mcp.converter import convert_document
from openapi2mcp.features import Features
from openapi2mcp.models import Server
from openapi2mcp.project import (
    apply_template_features,
    copy_template,
    features_for,
    update_package_json,
    write_project,
)

AUTH_SOURCE = (
    "import { BASE_URL } from \"./constants.js\";\n"
    "// START_OF Features.Auth\n"
    "// import { OAUTH_TOKEN_URL } from \"./constants.js\";\n"
    "// END_OF Features.Auth\n"
    "export const ready = true;\n"
)


@pytest.fixture
def template_dir(tmp_path):
    """A small TypeScript skeleton with a stale tool and ignored directories."""
    root = tmp_path / "template"
    tools = root / "src" / "routes" / "v1" / "mcp" / "tools"
    tools.mkdir(parents=True)
    (tools / "index.ts").write_text("// placeholder\n")
    (tools / "example_tool.ts").write_text("// stale\n")
    (root / "src" / "auth.ts").write_text(AUTH_SOURCE)
    (root / "package.json").write_text(json.dumps({"name": "template", "version": "0.0.0"}))
    (root / "node_modules" / "zod").mkdir(parents=True)
    (root / "node_modules" / "zod" / "index.js").write_text("")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")
    return root


class TestCopyTemplate:

    def test_ignored_directories(self, template_dir, tmp_path):
        out = tmp_path / "out"
        copy_template(template_dir, out)
        assert (out / "package.json").exists()
        assert (out / "src" / "auth.ts").exists()
        assert not (out / "node_modules").exists()
        assert not (out / ".git").exists()

    def test_missing_template(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            copy_template(tmp_path / "nope", tmp_path / "out")


class TestTemplateFeatures:

    def test_auth_enabled(self, template_dir):
        changed = apply_template_features(template_dir, Features(auth=True))
        assert changed == [template_dir / "src" / "auth.ts"]
        text = (template_dir / "src" / "auth.ts").read_text()
        assert 'import { OAUTH_TOKEN_URL } from "./constants.js";' in text
        assert "START_OF" not in text

    def test_auth_disabled(self, template_dir):
        apply_template_features(template_dir, Features(auth=False))
        text = (template_dir / "src" / "auth.ts").read_text()
        assert "OAUTH_TOKEN_URL" not in text
        assert text == 'import { BASE_URL } from "./constants.js";\nexport const ready = true;\n'

    def test_binary_files_skipped(self, template_dir):
        apply_template_features(template_dir, Features(auth=True))
        assert (template_dir / "logo.png").read_bytes() == b"\x89PNG\r\n\x1a\n\xff\xfe"

    def test_features_follow_oauth2(self):
        plain = Server(name="A", version="1", base_url="")
        assert features_for(plain) == Features(auth=False)
        oauth = Server(name="A", version="1", base_url="", oauth2=OAuth2Info("https://a", "https://b"))
        assert features_for(oauth) == Features(auth=True)


class TestPackageJson:

    def test_updated(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"name": "template", "private": True}))
        server = Server(name="Pet Store", version="2.0.0", base_url="", description="Pets")
        assert update_package_json(tmp_path, server)
        data = json.loads((tmp_path / "package.json").read_text())
        assert data == {
            "name": "pet-store",
            "private": True,
            "version": "2.0.0",
            "description": "Pets",
        }

    def test_missing(self, tmp_path):
        assert not update_package_json(tmp_path, Server(name="A", version="1", base_url=""))


class TestWriteProject:

    def test_without_template(self, items_spec, tmp_path):
        server = convert_document(items_spec)
        out = tmp_path / "out"
        written = write_project(server, generate_files(server), out)
        assert len(written) == 4
        tools = out / "src" / "routes" / "v1" / "mcp" / "tools"
        assert sorted(p.name for p in tools.iterdir()) == [
            "get_items_itemid.ts",
            "index.ts",
            "post_items_itemid.ts",
        ]
        constants = (out / "src" / "constants.ts").read_text()
        assert constants == 'export const BASE_URL = "https://api.example.com/v1";\n'

    def test_with_template(self, items_spec, template_dir, tmp_path):
        server = convert_document(items_spec)
        out = tmp_path / "out"
        write_project(server, generate_files(server), out, template_dir)

        tools = out / "src" / "routes" / "v1" / "mcp" / "tools"
        assert not (tools / "example_tool.ts").exists()
        assert "tool_get_items_itemid.setupTool(server);" in (tools / "index.ts").read_text()
        assert "OAUTH_TOKEN_URL" not in (out / "src" / "auth.ts").read_text()
        data = json.loads((out / "package.json").read_text())
        assert data["name"] == "items-api"
        assert data["version"] == "1.2.0"

    def test_template_untouched(self, items_spec, template_dir, tmp_path):
        server = convert_document(items_spec)
        write_project(server, generate_files(server), tmp_path / "out", template_dir)
        assert (template_dir / "src" / "auth.ts").read_text() == AUTH_SOURCE

    def test_oauth2_template(self, pets_spec, template_dir, tmp_path):
        server = convert_document(pets_spec)
        out = tmp_path / "out"
        write_project(server, generate_files(server), out, template_dir)
        assert "OAUTH_TOKEN_URL" in (out / "src" / "auth.ts").read_text()
        assert "OAUTH_TOKEN_URL" in (out / "src" / "constants.ts").read_text()

    def test_rerun_removes_stale_tools(self, items_spec, tmp_path):
        out = tmp_path / "out"
        server = convert_document(items_spec)
        write_project(server, generate_files(server), out)

        del items_spec["paths"]["/items/{itemId}"]["post"]
        server = convert_document(items_spec)
        write_project(server, generate_files(server), out)

        tools = out / "src" / "routes" / "v1" / "mcp" / "tools"
        assert sorted(p.name for p in tools.iterdir()) == ["get_items_itemid.ts", "index.ts"]
