"""Structural validation: checks that make a definition impossible to generate from.

Every problem is collected in a single pass. The error list is created per
call and threaded through the helpers, so concurrent validations never
share state.
"""

import logging

from pydantic import BaseModel

from api_codegen.parser.base import (
    Api,
    ApiDefinition,
    ClassDefinition,
    FieldDefinition,
    ValidationConfig,
    has_circular_reference,
)

logger = logging.getLogger(__name__)


class ValidationError(BaseModel):
    """One structural problem, located by a dotted field path."""

    field: str
    message: str
    value: str | None = None
    suggestion: str | None = None

    def __str__(self) -> str:
        return f"{self.field} - {self.message}"


class ValidationResult(BaseModel):
    valid: bool
    errors: list[ValidationError] = []

    def error_message(self) -> str:
        """Render one line per error, empty when valid."""
        return "".join(f"Validation failed: {e}\n" for e in self.errors)


def validate(definition: ApiDefinition | None) -> ValidationResult:
    """Validate a definition and return every structural error found."""
    errors: list[ValidationError] = []

    if definition is None:
        errors.append(ValidationError(field="api", message="API definition must not be empty"))
        return ValidationResult(valid=False, errors=errors)

    if not definition.apis:
        errors.append(ValidationError(field="apis", message="API list must not be empty"))
        return ValidationResult(valid=False, errors=errors)

    _check_duplicates(definition.apis, errors)
    for i, api in enumerate(definition.apis):
        _validate_api(api, f"apis[{i}]", errors)

    if errors:
        logger.debug("Structural validation found %d error(s)", len(errors))
    return ValidationResult(valid=not errors, errors=errors)


def _check_duplicates(apis: list[Api], errors: list[ValidationError]) -> None:
    seen: dict[tuple, Api] = {}
    for i, api in enumerate(apis):
        if _blank(api.path) or api.method is None:
            continue
        method = api.method.value
        key = (api.path, method)
        first = seen.get(key)
        if first is not None:
            errors.append(
                ValidationError(
                    field=f"apis[{i}]",
                    message=f"API {method} {api.path} ({api.name}) duplicates {first.name}",
                    value=f"{method} {api.path}",
                )
            )
        else:
            seen[key] = api


def _validate_api(api: Api, prefix: str, errors: list[ValidationError]) -> None:
    if _blank(api.name):
        errors.append(
            ValidationError(
                field=f"{prefix}.name",
                message="API name must not be blank",
                suggestion="Provide a unique endpoint name, e.g. createUser",
            )
        )

    if _blank(api.path):
        errors.append(
            ValidationError(
                field=f"{prefix}.path",
                message="API path must not be blank",
                suggestion="Provide a path, e.g. /api/users",
            )
        )
    elif not api.path.startswith("/"):
        errors.append(
            ValidationError(
                field=f"{prefix}.path",
                message="API path must start with /",
                value=api.path,
                suggestion="Start the path with /, e.g. /api/users",
            )
        )

    if api.method is None:
        errors.append(
            ValidationError(
                field=f"{prefix}.method",
                message="HTTP method must be set",
                suggestion="Use one of GET, POST, PUT, DELETE, PATCH",
            )
        )

    if api.request is not None:
        _validate_class(api.request, f"{prefix}.request", errors)
    if api.response is not None:
        _validate_class(api.response, f"{prefix}.response", errors)


def _validate_class(class_def: ClassDefinition, prefix: str, errors: list[ValidationError]) -> None:
    if _blank(class_def.class_name):
        errors.append(ValidationError(field=f"{prefix}.className", message="Class name must not be blank"))

    for i, field in enumerate(class_def.fields):
        _validate_field(field, f"{prefix}.fields[{i}]", errors)


def _validate_field(field: FieldDefinition, prefix: str, errors: list[ValidationError]) -> None:
    if _blank(field.name):
        errors.append(ValidationError(field=f"{prefix}.name", message="Field name must not be blank"))

    type_ref = field.type_ref
    if type_ref is None:
        errors.append(ValidationError(field=f"{prefix}.type", message="Field type must not be blank"))
        return

    if type_ref.is_malformed:
        errors.append(
            ValidationError(
                field=f"{prefix}.type",
                message=f"List type {field.type} has no element type",
                value=field.type,
                suggestion="Declare the element type, e.g. List<String>",
            )
        )

    if has_circular_reference(field):
        errors.append(ValidationError(field=prefix, message=f"Field {field.name} has a circular reference"))

    if field.validation is not None:
        _validate_ranges(field, field.validation, f"{prefix}.validation", errors)

    if field.base_type == "Enum" and not field.enum_values:
        errors.append(ValidationError(field=f"{prefix}.enumValues", message="Enum type requires enumValues"))

    for i, child in enumerate(field.fields or []):
        _validate_field(child, f"{prefix}.fields[{i}]", errors)


def _validate_ranges(
    field: FieldDefinition, v: ValidationConfig, prefix: str, errors: list[ValidationError]
) -> None:
    if field.is_string:
        if v.min_length is not None and v.min_length < 0:
            errors.append(ValidationError(field=f"{prefix}.minLength", message="minLength must not be negative"))
        if v.max_length is not None and v.max_length < 0:
            errors.append(ValidationError(field=f"{prefix}.maxLength", message="maxLength must not be negative"))
        if v.min_length is not None and v.max_length is not None and v.min_length > v.max_length:
            errors.append(
                ValidationError(
                    field=prefix,
                    message=f"minLength ({v.min_length}) must not be greater than maxLength ({v.max_length})",
                )
            )

    if field.is_numeric:
        if v.min is not None and v.max is not None and v.max <= v.min:
            errors.append(
                ValidationError(field=prefix, message=f"max ({v.max}) must be greater than min ({v.min})")
            )

    if field.is_list:
        if v.min_size is not None and v.min_size < 0:
            errors.append(ValidationError(field=f"{prefix}.minSize", message="minSize must not be negative"))
        if v.max_size is not None and v.max_size <= 0:
            errors.append(ValidationError(field=f"{prefix}.maxSize", message="maxSize must be greater than 0"))
        if v.min_size is not None and v.max_size is not None and v.min_size > v.max_size:
            errors.append(
                ValidationError(
                    field=prefix,
                    message=f"minSize ({v.min_size}) must not be greater than maxSize ({v.max_size})",
                )
            )


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()
