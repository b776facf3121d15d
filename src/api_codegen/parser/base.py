"""Canonical data models for API definitions.

Every ingestion path (native YAML, Swagger, OpenAPI) converts its input
into these models. Keys use the camelCase spelling of the native schema
format so that a model can be loaded from, and dumped back to, the same
YAML document.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SCALAR_TYPES = {
    "String",
    "Integer",
    "Long",
    "Double",
    "Float",
    "Boolean",
    "LocalDate",
    "LocalDateTime",
    "Date",
    "BigDecimal",
    "Object",
}
NUMERIC_TYPES = {"Integer", "Long", "Double", "Float", "BigDecimal"}
DATE_TYPES = {"LocalDate", "LocalDateTime", "Date"}
ENUM_TYPE = "Enum"
LIST_PREFIX = "List<"

PARAM_LOCATIONS = ("path", "query", "header", "cookie", "body")


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class TypeKind(str, Enum):
    SCALAR = "scalar"
    ENUM = "enum"
    LIST = "list"
    OBJECT = "object"


class FieldType(BaseModel):
    """Parsed form of a field's type tag.

    ``element`` is only set for lists; a list whose generic parameter could
    not be extracted keeps ``element=None``.
    """

    model_config = ConfigDict(frozen=True)

    kind: TypeKind
    name: str
    element: "FieldType | None" = None

    @property
    def is_malformed(self) -> bool:
        if self.kind is not TypeKind.LIST:
            return False
        return self.element is None or self.element.is_malformed

    def object_name(self) -> str | None:
        """Name of the object type this tag ultimately refers to, if any."""
        if self.kind is TypeKind.OBJECT:
            return self.name
        if self.kind is TypeKind.LIST and self.element is not None:
            return self.element.object_name()
        return None


def parse_type(raw: str | None) -> FieldType | None:
    """Parse a raw type tag such as ``List<Address>`` into a FieldType.

    Returns None for a missing or blank tag.
    """
    if raw is None:
        return None
    clean = raw.replace('"', "").strip()
    if not clean:
        return None
    if clean == ENUM_TYPE:
        return FieldType(kind=TypeKind.ENUM, name=clean)
    if clean == "List" or clean.startswith(LIST_PREFIX):
        element = None
        if clean.startswith(LIST_PREFIX) and clean.endswith(">"):
            inner = clean[len(LIST_PREFIX):-1].strip()
            element = parse_type(inner)
        return FieldType(kind=TypeKind.LIST, name=clean, element=element)
    if clean in SCALAR_TYPES:
        return FieldType(kind=TypeKind.SCALAR, name=clean)
    return FieldType(kind=TypeKind.OBJECT, name=clean)


class ElementValidationConfig(_Model):
    """Constraints applied to each element of a collection field."""

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    email: bool | None = None
    min: int | float | None = None
    max: int | float | None = None


class ValidationConfig(_Model):
    """Constraint set attached to a single field."""

    not_null: bool | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    email: bool | None = None
    min: int | float | None = None
    max: int | float | None = None
    past: bool | None = None
    future: bool | None = None
    min_size: int | None = None
    max_size: int | None = None
    element_validation: ElementValidationConfig | None = None


class FieldDefinition(_Model):
    """One member of a class; carries its own sub-schema when it is an object."""

    name: str | None = None
    type: str | None = None
    required: bool = False
    description: str | None = None
    location: str | None = Field(default=None, alias="in")  # path / query / header / cookie / body
    validation: ValidationConfig | None = None
    enum_values: list[str | int | float] | None = None
    fields: list["FieldDefinition"] | None = None

    @property
    def type_ref(self) -> FieldType | None:
        return parse_type(self.type)

    @property
    def base_type(self) -> str | None:
        """The type tag with quotes and whitespace removed."""
        ref = self.type_ref
        return ref.name if ref else None

    @property
    def is_string(self) -> bool:
        return self.base_type == "String"

    @property
    def is_numeric(self) -> bool:
        return self.base_type in NUMERIC_TYPES

    @property
    def is_date(self) -> bool:
        return self.base_type in DATE_TYPES

    @property
    def is_list(self) -> bool:
        ref = self.type_ref
        return ref is not None and ref.kind is TypeKind.LIST

    @property
    def is_enum(self) -> bool:
        return self.base_type == ENUM_TYPE or bool(self.enum_values)

    @property
    def is_object(self) -> bool:
        ref = self.type_ref
        return ref is not None and ref.kind is TypeKind.OBJECT and not self.enum_values

    @property
    def has_nested_fields(self) -> bool:
        return bool(self.fields)

    @property
    def is_body(self) -> bool:
        return self.location in (None, "", "body")


class ClassDefinition(_Model):
    """A named record type used for request and response shapes."""

    class_name: str | None = None
    fields: list[FieldDefinition] = []


class Api(_Model):
    """A single API endpoint."""

    name: str | None = None
    path: str | None = None
    method: HttpMethod | None = None
    description: str | None = None
    request: ClassDefinition | None = None
    response: ClassDefinition | None = None
    class_annotations: list[str] | None = None
    method_annotations: list[str] | None = None
    annotations: list[str] | None = None


class ApiDefinition(_Model):
    """Root aggregate: the ordered list of endpoints."""

    apis: list[Api] = []


def has_circular_reference(field: FieldDefinition, visited: frozenset[str] = frozenset()) -> bool:
    """Check whether a field re-enters an object type already on its descent path.

    ``visited`` holds the type names of the enclosing fields only, so the
    same type appearing in two sibling branches is not a cycle.
    """
    ref = field.type_ref
    name = ref.object_name() if ref else None
    if name is None:
        return False
    if name in visited:
        return True
    if not field.fields:
        return False
    path = visited | {name}
    return any(has_circular_reference(child, path) for child in field.fields)
