"""Tests for loading and validating OpenAPI documents."""

import pytest
import yaml

from conftest import ITEMS_SPEC, make_spec
from openapi2mcp.errors import SpecValidationError
from openapi2mcp.loader import get_components, get_paths, get_servers, load_spec, validate_spec


class TestLoadSpec:

    def test_json(self, items_spec_file):
        assert load_spec(items_spec_file) == ITEMS_SPEC

    def test_yaml(self, tmp_path):
        path = tmp_path / "items.yaml"
        path.write_text(yaml.safe_dump(ITEMS_SPEC))
        assert load_spec(path) == ITEMS_SPEC

    def test_yml_as_string_path(self, tmp_path):
        path = tmp_path / "items.yml"
        path.write_text(yaml.safe_dump(ITEMS_SPEC))
        assert load_spec(str(path))["info"]["title"] == "Items API"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecValidationError, match="Cannot read"):
            load_spec(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("openapi: [3.0.0\n")
        with pytest.raises(SpecValidationError, match="Cannot parse"):
            load_spec(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")
        with pytest.raises(SpecValidationError, match="Cannot parse"):
            load_spec(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(SpecValidationError):
            load_spec(path)


class TestAccessors:

    def test_missing_sections(self):
        assert get_paths({}) == {}
        assert get_components({}) == {}
        assert get_servers({}) == []

    def test_null_sections(self):
        assert get_paths({"paths": None}) == {}
        assert get_servers({"servers": None}) == []


class TestValidateSpec:

    def test_valid(self, items_spec):
        validate_spec(items_spec)

    def test_openapi_31(self, pets_spec):
        validate_spec(pets_spec)

    def test_swagger_2(self):
        with pytest.raises(SpecValidationError, match="Unsupported OpenAPI version"):
            validate_spec(make_spec({"/x": {"get": {}}}, openapi="2.0"))

    def test_openapi_4(self):
        with pytest.raises(SpecValidationError):
            validate_spec(make_spec({"/x": {"get": {}}}, openapi="4.0.0"))

    def test_missing_title(self):
        with pytest.raises(SpecValidationError, match="title"):
            validate_spec(make_spec({"/x": {"get": {}}}, info={"version": "1"}))

    def test_empty_paths(self):
        with pytest.raises(SpecValidationError, match="no paths"):
            validate_spec(make_spec({}))

    def test_single_server(self):
        validate_spec(make_spec({"/x": {"get": {}}}, servers=[{"url": "https://a.example.com"}]))

    def test_two_servers(self):
        spec = make_spec({"/x": {"get": {}}}, servers=[{"url": "a"}, {"url": "b"}])
        with pytest.raises(SpecValidationError, match="found 2"):
            validate_spec(spec)
