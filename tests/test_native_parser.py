from pathlib import Path

import pytest

from api_codegen.errors import ParseError
from api_codegen.parser.base import HttpMethod
from api_codegen.parser.detect import detect_format
from api_codegen.parser.loader import parse, parse_file
from api_codegen.parser.native import format_loc, parse_native

FIXTURES = Path(__file__).parent / "fixtures"


class TestDetectFormat:
    def test_native(self):
        assert detect_format("apis:\n  - name: a\n") == "native"

    def test_swagger_marker(self):
        assert detect_format('swagger: "2.0"\npaths: {}\n') == "swagger"

    def test_openapi_marker_case_insensitive(self):
        assert detect_format("OpenAPI: 3.0.0\n") == "swagger"

    def test_json_marker(self):
        assert detect_format('{"openapi": "3.0.0", "paths": {}}') == "swagger"

    def test_info_and_paths(self):
        assert detect_format("info:\n  title: x\npaths:\n  /a: {}\n") == "swagger"

    def test_empty(self):
        assert detect_format("") == "native"


class TestNativeParser:
    def test_parse_fixture(self):
        definition = parse_file(FIXTURES / "user_api.yaml")
        assert [api.name for api in definition.apis] == ["createUser", "getUser"]

        create = definition.apis[0]
        assert create.method is HttpMethod.POST
        assert create.request.class_name == "CreateUserReq"
        username = create.request.fields[0]
        assert username.required is True
        assert username.validation.min_length == 4
        assert username.validation.pattern == "^[a-zA-Z0-9_]+$"

    def test_nested_fields_and_locations(self):
        definition = parse_file(FIXTURES / "user_api.yaml")
        address = definition.apis[0].request.fields[4]
        assert address.type == "Address"
        assert [f.name for f in address.fields] == ["city", "zipCode"]

        get_user = definition.apis[1]
        assert get_user.request.fields[0].location == "path"
        assert get_user.response.fields[1].enum_values == ["ACTIVE", "LOCKED"]

    def test_bad_method_names_field_and_line(self):
        with pytest.raises(ParseError) as exc_info:
            parse_file(FIXTURES / "bad_method.yaml")
        err = exc_info.value
        assert err.field == "apis[0].method"
        assert err.line == 4
        assert "line 4" in str(err)
        assert "GET, POST, PUT, DELETE, PATCH" in str(err)
        assert "bad_method.yaml" in str(err)

    def test_wrong_value_type(self):
        text = "apis:\n  - name: a\n    path: /a\n    method: GET\n    request:\n      className: R\n      fields:\n        - name: x\n          type: String\n          required: maybe\n"
        with pytest.raises(ParseError) as exc_info:
            parse_native(text)
        assert exc_info.value.field == "apis[0].request.fields[0].required"
        assert exc_info.value.line == 10

    def test_yaml_syntax_error(self):
        with pytest.raises(ParseError) as exc_info:
            parse_native("apis: [unclosed\n")
        assert "YAML syntax error" in str(exc_info.value)
        assert exc_info.value.line is not None

    def test_missing_apis(self):
        with pytest.raises(ParseError) as exc_info:
            parse_native("name: something\n")
        assert exc_info.value.field == "apis"

    def test_empty_document(self):
        with pytest.raises(ParseError):
            parse_native("")

    def test_non_mapping_root(self):
        with pytest.raises(ParseError):
            parse_native("- a\n- b\n")

    def test_empty_apis_list(self):
        assert parse_native("apis:\n").apis == []

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse("apis: [unclosed\n")

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            parse("apis: []\n", fmt="postman")


class TestFormatLoc:
    def test_format(self):
        assert format_loc(("apis", 0, "request", "fields", 2, "type")) == "apis[0].request.fields[2].type"
