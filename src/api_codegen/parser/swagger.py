"""OpenAPI / Swagger document converter.

Converts Swagger 2.0 and OpenAPI 3.x documents into the canonical
ApiDefinition model.
"""

import logging
import re

import yaml
from pydantic import ValidationError

from api_codegen.errors import ParseError
from api_codegen.generator.naming import capitalize, java_identifier
from api_codegen.parser.base import (
    Api,
    ApiDefinition,
    ClassDefinition,
    FieldDefinition,
    HttpMethod,
    ValidationConfig,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch")
SUCCESS_CODES = ("200", "201", "202", "204")

CLASS_ANNOTATIONS_KEY = "x-java-class-annotations"
METHOD_ANNOTATIONS_KEY = "x-java-method-annotations"

# Model attribute -> the schema keyword it was read from
_SOURCE_KEYWORDS = {
    "min": "minimum",
    "max": "maximum",
    "min_length": "minLength",
    "max_length": "maxLength",
    "min_size": "minItems",
    "max_size": "maxItems",
    "minSize": "minItems",
    "maxSize": "maxItems",
    "description": "summary",
}


def parse_swagger(text: str) -> ApiDefinition:
    """Parse Swagger/OpenAPI YAML or JSON text into an ApiDefinition."""
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark else None
        raise ParseError(f"Swagger parse failed: {e}", line=line) from e
    if not isinstance(doc, dict):
        raise ParseError("Swagger document root must be a mapping")
    return convert_document(doc)


def convert_document(doc: dict) -> ApiDefinition:
    """Convert an already-loaded Swagger/OpenAPI document."""
    base_path = doc.get("basePath") or ""
    servers = doc.get("servers")
    if isinstance(servers, list) and servers and isinstance(servers[0], dict):
        base_path = _strip_host(servers[0].get("url") or "")

    paths = doc.get("paths")
    if not isinstance(paths, dict):
        raise ParseError("No 'paths' definition found", field="paths")

    apis = []
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        class_annotations = _string_list(path_item.get(CLASS_ANNOTATIONS_KEY))
        shared_params = path_item.get("parameters") or []

        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            try:
                api = _convert_operation(str(path), method, operation, doc, base_path, shared_params, class_annotations)
            except ValidationError as e:
                raise _operation_error(e, str(path), method) from e
            apis.append(api)

    if not apis:
        raise ParseError("No API operations found under 'paths'", field="paths")

    logger.debug("Converted %d operation(s) from %d path(s)", len(apis), len(paths))
    return ApiDefinition(apis=apis)


def _operation_error(e: ValidationError, path: str, method: str) -> ParseError:
    first = e.errors()[0]
    # Union members append their own tag, so only the attribute itself is named
    name = str(first["loc"][0]) if first["loc"] else "operation"
    keyword = _SOURCE_KEYWORDS.get(name, name)
    return ParseError(
        f"Invalid '{keyword}' in {method.upper()} {path}: {first['msg']}",
        field=f"paths.{path}.{method}",
    )


def _convert_operation(
    path: str,
    method: str,
    operation: dict,
    doc: dict,
    base_path: str,
    shared_params: list,
    class_annotations: list[str] | None,
) -> Api:
    name = operation.get("operationId") or ""
    if not str(name).strip():
        name = generate_api_name(method, path)

    params = list(shared_params) + list(operation.get("parameters") or [])
    # Every operation gets its own classes so endpoints never share a file
    prefix = capitalize(java_identifier(str(name)))

    return Api(
        name=str(name),
        path=normalize_path(base_path + path),
        method=HttpMethod(method.upper()),
        description=operation.get("summary") or operation.get("description"),
        request=_convert_request(params, operation.get("requestBody"), doc, f"{prefix}Request"),
        response=_convert_response(operation.get("responses") or {}, doc, f"{prefix}Response"),
        class_annotations=class_annotations,
        method_annotations=_string_list(operation.get(METHOD_ANNOTATIONS_KEY)),
    )


def _convert_request(params: list, body: dict | None, doc: dict, class_name: str) -> ClassDefinition | None:
    fields = []

    for p in params:
        if not isinstance(p, dict):
            continue
        if "$ref" in p:
            p = resolve_ref(doc, p["$ref"])
        if p.get("in") == "body":
            # Swagger 2.0 body parameter
            fields.extend(_body_fields(p.get("schema"), doc))
            continue
        fields.append(_parameter_field(p))

    if isinstance(body, dict):
        if "$ref" in body:
            body = resolve_ref(doc, body["$ref"])
        fields.extend(_body_fields(_content_schema(body.get("content")), doc))

    if not fields:
        return None
    return ClassDefinition(class_name=class_name, fields=fields)


def _parameter_field(p: dict) -> FieldDefinition:
    # OpenAPI 3 nests the type under "schema"; Swagger 2.0 puts it inline
    schema = p.get("schema") if isinstance(p.get("schema"), dict) else p
    field = _typed_field(str(p.get("name", "")), schema)
    field.location = p.get("in", "query")
    field.required = bool(p.get("required", False))
    if p.get("description"):
        field.description = p["description"]
    return field


def _body_fields(schema: dict | None, doc: dict) -> list[FieldDefinition]:
    fields = fields_from_schema(schema, doc, "body")
    for field in fields:
        field.location = "body"
    return fields


def _convert_response(responses: dict, doc: dict, class_name: str) -> ClassDefinition:
    by_code = {str(code): resp for code, resp in responses.items()}

    success = None
    for code in SUCCESS_CODES:
        if code in by_code:
            success = by_code[code]
            break
    if success is None and by_code:
        success = next(iter(by_code.values()))

    fields = []
    if isinstance(success, dict):
        if "$ref" in success:
            success = resolve_ref(doc, success["$ref"])
        schema = success.get("schema") or _content_schema(success.get("content"))
        fields = fields_from_schema(schema, doc, "data")

    if not fields:
        fields = [FieldDefinition(name="success", type="Boolean", description="Whether the operation succeeded")]

    return ClassDefinition(class_name=class_name, fields=fields)


def _content_schema(content: dict | None) -> dict | None:
    if not isinstance(content, dict):
        return None
    if "application/json" in content:
        return content["application/json"].get("schema")
    for ct_data in content.values():
        if isinstance(ct_data, dict) and "schema" in ct_data:
            return ct_data["schema"]
    return None


def fields_from_schema(schema: dict | None, doc: dict, default_name: str) -> list[FieldDefinition]:
    """Flatten a request/response schema into top-level fields.

    A ``$ref`` becomes a single field typed with the referenced name, and an
    array becomes a single ``List<...>`` field named ``default_name``.
    """
    if not isinstance(schema, dict):
        return []

    if "$ref" in schema:
        ref_name = ref_short_name(schema["$ref"])
        name = lower_camel(ref_name) if ref_name else default_name
        return [FieldDefinition(name=name, type=ref_name or "Object")]

    if schema.get("type") == "array":
        return [FieldDefinition(name=default_name, type=schema_type(schema))]

    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return []

    required = schema.get("required")
    required_names = set(required) if isinstance(required, list) else set()

    fields = []
    for prop_name, prop in properties.items():
        prop = prop if isinstance(prop, dict) else {}
        field = _typed_field(str(prop_name), prop, doc)
        if prop.get("description"):
            field.description = prop["description"]
        if prop_name in required_names or prop.get("required") is True:
            field.required = True
        fields.append(field)
    return fields


def _typed_field(name: str, schema: dict, doc: dict | None = None) -> FieldDefinition:
    """Build a field with type, enum values, constraints and inline nesting."""
    field = FieldDefinition(name=name, type=schema_type(schema))

    if "enum" in schema and schema.get("type") in (None, "string", "integer"):
        field.type = "Enum"
        field.enum_values = list(schema["enum"])
    elif "$ref" not in schema and isinstance(schema.get("properties"), dict) and doc is not None:
        # Inline object schema: the field carries its own sub-schema
        field.type = name[:1].upper() + name[1:] if name else "Object"
        field.fields = fields_from_schema(schema, doc, name) or None

    field.validation = extract_validation(schema)
    return field


def extract_validation(schema: dict) -> ValidationConfig | None:
    """Translate inline JSON-schema constraint keywords into a ValidationConfig."""
    if not isinstance(schema, dict):
        return None

    validation = ValidationConfig(
        min=schema.get("minimum"),
        max=schema.get("maximum"),
        min_length=schema.get("minLength"),
        max_length=schema.get("maxLength"),
        pattern=schema.get("pattern") or None,
        email=True if schema.get("format") == "email" else None,
        min_size=schema.get("minItems"),
        max_size=schema.get("maxItems"),
    )
    if not validation.model_dump(exclude_none=True):
        return None
    return validation


def schema_type(schema: dict | None) -> str:
    """Resolve a JSON schema to a canonical type tag."""
    if not isinstance(schema, dict):
        return "String"
    if "$ref" in schema:
        return ref_short_name(schema["$ref"]) or "Object"
    if schema.get("type") == "array":
        items = schema.get("items")
        if isinstance(items, dict):
            return f"List<{schema_type(items)}>"
        return "List<Object>"
    if "type" not in schema:
        return "Object" if "properties" in schema else "String"
    return json_type(str(schema["type"]), str(schema.get("format") or ""))


def json_type(type_name: str, fmt: str = "") -> str:
    """Map a JSON schema type/format pair to a canonical scalar type."""
    t = type_name.lower()
    if t == "string":
        if fmt == "date-time":
            return "LocalDateTime"
        if fmt == "date":
            return "LocalDate"
        return "String"
    if t in ("integer", "int32"):
        return "Long" if fmt == "int64" else "Integer"
    if t in ("long", "int64"):
        return "Long"
    if t in ("number", "double", "float"):
        return "Double"
    if t == "boolean":
        return "Boolean"
    if t == "array":
        return "List<Object>"
    if t == "object":
        return "Object"
    return "String"


def resolve_ref(doc: dict, ref: str) -> dict:
    """Resolve a local ``#/...`` reference; unknown references resolve to {}."""
    if not ref.startswith("#/"):
        return {}
    node = doc
    for part in ref[2:].split("/"):
        if not isinstance(node, dict) or part not in node:
            return {}
        node = node[part]
    return node if isinstance(node, dict) else {}


def ref_short_name(ref: str) -> str:
    return ref.rsplit("/", 1)[-1] if ref else ""


def lower_camel(name: str) -> str:
    return name[:1].lower() + name[1:]


def generate_api_name(method: str, path: str) -> str:
    """Synthesize an endpoint name from the HTTP verb and path.

    ``GET /users/{id}/orders`` becomes ``getUsers_orders``.
    """
    segments = [s for s in path.split("/") if s and not re.fullmatch(r"\{[^}]+\}", s)]
    name = "_".join(segments) or "root"
    return method.lower() + name[0].upper() + name[1:]


def normalize_path(path: str) -> str:
    """Collapse repeated slashes and drop an all-caps placeholder prefix (``/XXX/users``)."""
    if "//" in path:
        path = re.sub(r"/+", "/", path)
    if re.match(r"^/[A-Z][A-Z0-9_]*/", path):
        path = re.sub(r"^/[A-Z][A-Z0-9_]*", "", path, count=1)
    return path


def _strip_host(url: str) -> str:
    return re.sub(r"^[a-zA-Z][a-zA-Z0-9+.-]*://[^/]+", "", url)


def _string_list(value) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [str(v) for v in value]
