from pathlib import Path

import pytest

from api_codegen.errors import ParseError
from api_codegen.parser.base import HttpMethod
from api_codegen.parser.loader import parse, parse_file
from api_codegen.parser.swagger import (
    convert_document,
    generate_api_name,
    json_type,
    normalize_path,
    parse_swagger,
    resolve_ref,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _by_name(definition, name):
    return next(api for api in definition.apis if api.name == name)


class TestNormalizePath:
    def test_collapse_repeated_slashes(self):
        assert normalize_path("/api//users") == "/api/users"

    def test_strip_all_caps_prefix(self):
        assert normalize_path("/XXX/users") == "/users"

    def test_keep_lowercase_prefix(self):
        assert normalize_path("/api/users") == "/api/users"

    def test_all_caps_single_segment_kept(self):
        assert normalize_path("/HEALTH") == "/HEALTH"


class TestGenerateApiName:
    def test_strips_path_params(self):
        assert generate_api_name("GET", "/users/{id}/orders") == "getUsers_orders"

    def test_simple(self):
        assert generate_api_name("post", "/pets") == "postPets"

    def test_root(self):
        assert generate_api_name("get", "/") == "getRoot"


class TestJsonType:
    def test_mapping(self):
        assert json_type("string") == "String"
        assert json_type("string", "date") == "LocalDate"
        assert json_type("string", "date-time") == "LocalDateTime"
        assert json_type("integer") == "Integer"
        assert json_type("integer", "int64") == "Long"
        assert json_type("number") == "Double"
        assert json_type("boolean") == "Boolean"
        assert json_type("object") == "Object"


class TestSwagger2:
    def test_detected_and_converted(self):
        definition = parse_file(FIXTURES / "petstore_swagger2.yaml")
        assert [api.name for api in definition.apis] == ["queryPets", "postPets", "deletePet"]

    def test_base_path_and_method(self):
        definition = parse_file(FIXTURES / "petstore_swagger2.yaml")
        api = _by_name(definition, "queryPets")
        assert api.path == "/v1/pets"
        assert api.method is HttpMethod.GET
        assert api.description == "List pets"

    def test_query_parameter_constraints(self):
        api = _by_name(parse_file(FIXTURES / "petstore_swagger2.yaml"), "queryPets")
        limit, status = api.request.fields
        assert limit.location == "query"
        assert limit.type == "Integer"
        assert limit.validation.min == 1
        assert limit.validation.max == 100
        assert status.type == "Enum"
        assert status.enum_values == ["available", "sold"]

    def test_array_response(self):
        api = _by_name(parse_file(FIXTURES / "petstore_swagger2.yaml"), "queryPets")
        assert api.response.class_name == "QueryPetsResponse"
        assert [(f.name, f.type) for f in api.response.fields] == [("data", "List<Pet>")]

    def test_body_parameter_is_flattened(self):
        api = _by_name(parse_file(FIXTURES / "petstore_swagger2.yaml"), "postPets")
        fields = {f.name: f for f in api.request.fields}
        assert list(fields) == ["name", "ownerEmail", "tags"]
        assert all(f.location == "body" for f in fields.values())
        assert fields["name"].required is True
        assert fields["name"].validation.max_length == 50
        assert fields["ownerEmail"].required is False
        assert fields["ownerEmail"].validation.email is True
        assert fields["tags"].type == "List<String>"
        assert fields["tags"].validation.max_size == 5

    def test_ref_response_named_after_type(self):
        api = _by_name(parse_file(FIXTURES / "petstore_swagger2.yaml"), "postPets")
        assert [(f.name, f.type) for f in api.response.fields] == [("pet", "Pet")]

    def test_path_parameter_int64(self):
        api = _by_name(parse_file(FIXTURES / "petstore_swagger2.yaml"), "deletePet")
        pet_id = api.request.fields[0]
        assert pet_id.location == "path"
        assert pet_id.required is True
        assert pet_id.type == "Long"

    def test_default_success_response(self):
        api = _by_name(parse_file(FIXTURES / "petstore_swagger2.yaml"), "deletePet")
        assert [(f.name, f.type) for f in api.response.fields] == [("success", "Boolean")]

    def test_class_names_are_unique_per_operation(self):
        definition = parse_file(FIXTURES / "petstore_swagger2.yaml")
        assert [(api.request.class_name, api.response.class_name) for api in definition.apis] == [
            ("QueryPetsRequest", "QueryPetsResponse"),
            ("PostPetsRequest", "PostPetsResponse"),
            ("DeletePetRequest", "DeletePetResponse"),
        ]

    def test_operation_id_made_into_class_prefix(self):
        doc = {"swagger": "2.0", "paths": {"/pets": {"get": {"operationId": "list-pets", "responses": {}}}}}
        assert convert_document(doc).apis[0].response.class_name == "ListPetsResponse"


class TestOpenApi3:
    def test_server_host_stripped_and_prefix_removed(self):
        api = _by_name(parse_file(FIXTURES / "orders_openapi3.yaml"), "createOrder")
        assert api.path == "/orders"

    def test_header_param_and_request_body(self):
        api = _by_name(parse_file(FIXTURES / "orders_openapi3.yaml"), "createOrder")
        header, items, delivery = api.request.fields
        assert (header.name, header.location, header.required) == ("X-Request-Id", "header", True)
        assert (items.type, items.location, items.required) == ("List<String>", "body", True)
        assert (delivery.type, delivery.required) == ("LocalDate", False)

    def test_response_types(self):
        api = _by_name(parse_file(FIXTURES / "orders_openapi3.yaml"), "createOrder")
        assert [(f.name, f.type) for f in api.response.fields] == [("orderId", "Long"), ("createdAt", "LocalDateTime")]

    def test_annotation_extensions(self):
        api = _by_name(parse_file(FIXTURES / "orders_openapi3.yaml"), "createOrder")
        assert api.class_annotations == ["@Slf4j"]
        assert api.method_annotations == ["@Timed"]

    def test_synthesized_name_and_collapsed_path(self):
        api = _by_name(parse_file(FIXTURES / "orders_openapi3.yaml"), "getOrders_items")
        assert api.path == "/orders/{orderId}/items"
        assert api.request.fields[0].type == "Integer"

    def test_no_success_response_defaults(self):
        api = _by_name(parse_file(FIXTURES / "orders_openapi3.yaml"), "getOrders_items")
        assert [f.name for f in api.response.fields] == ["success"]

    def test_first_response_used_without_success_code(self):
        doc = {
            "swagger": "2.0",
            "paths": {
                "/jobs": {
                    "post": {
                        "responses": {
                            "default": {"schema": {"type": "object", "properties": {"code": {"type": "integer"}}}}
                        }
                    }
                }
            },
        }
        assert [f.name for f in convert_document(doc).apis[0].response.fields] == ["code"]

    def test_server_path_kept(self):
        doc = {
            "openapi": "3.0.0",
            "servers": [{"url": "https://api.example.com/shop/"}],
            "paths": {"/items": {"get": {"responses": {"200": {"description": "ok"}}}}},
        }
        assert convert_document(doc).apis[0].path == "/shop/items"

    def test_ref_request_body(self):
        doc = {
            "openapi": "3.0.0",
            "paths": {
                "/users": {
                    "post": {
                        "operationId": "createUser",
                        "requestBody": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/UserInfo"}}}},
                        "responses": {"200": {"description": "ok"}},
                    }
                }
            },
        }
        field = convert_document(doc).apis[0].request.fields[0]
        assert (field.name, field.type, field.location) == ("userInfo", "UserInfo", "body")

    def test_inline_object_property_becomes_nested_fields(self):
        doc = {
            "openapi": "3.0.0",
            "paths": {
                "/users": {
                    "post": {
                        "requestBody": {
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {
                                            "address": {"type": "object", "properties": {"city": {"type": "string"}}}
                                        },
                                    }
                                }
                            }
                        },
                        "responses": {},
                    }
                }
            },
        }
        field = convert_document(doc).apis[0].request.fields[0]
        assert field.type == "Address"
        assert [f.name for f in field.fields] == ["city"]


class TestFailures:
    def test_missing_paths(self):
        with pytest.raises(ParseError) as exc_info:
            parse_swagger('swagger: "2.0"\ninfo:\n  title: x\n')
        assert exc_info.value.field == "paths"

    def test_no_operations(self):
        with pytest.raises(ParseError):
            parse('openapi: 3.0.0\npaths:\n  /a:\n    summary: nothing here\n')

    def test_invalid_yaml(self):
        with pytest.raises(ParseError):
            parse_swagger("openapi: [3.0\n")


class TestResolveRef:
    def test_local_ref(self):
        doc = {"components": {"schemas": {"Pet": {"type": "object"}}}}
        assert resolve_ref(doc, "#/components/schemas/Pet") == {"type": "object"}

    def test_unknown_ref(self):
        assert resolve_ref({}, "#/definitions/Missing") == {}
        assert resolve_ref({}, "other.yaml#/Pet") == {}


class TestConstraintTypeErrors:
    @staticmethod
    def _doc(constraint: str) -> str:
        return (
            "swagger: '2.0'\n"
            "paths:\n"
            "  /pets:\n"
            "    get:\n"
            "      parameters:\n"
            "        - name: tag\n"
            "          in: query\n"
            "          type: string\n"
            f"          {constraint}\n"
            "      responses: {}\n"
        )

    def test_non_string_pattern(self):
        with pytest.raises(ParseError) as exc_info:
            parse(self._doc("pattern: 123"))
        assert exc_info.value.field == "paths./pets.get"
        assert "'pattern' in GET /pets" in str(exc_info.value)

    def test_non_numeric_minimum(self):
        with pytest.raises(ParseError) as exc_info:
            parse_swagger(self._doc("minimum: abc"))
        assert "'minimum' in GET /pets" in str(exc_info.value)

    def test_non_integer_max_length(self):
        with pytest.raises(ParseError) as exc_info:
            parse_swagger(self._doc("maxLength: long"))
        assert "'maxLength'" in str(exc_info.value)
