"""Auto-fix for analysis findings.

Fixes are additive: a constraint the user already set is never changed.
The caller's definition is left untouched; fixes are applied to a deep copy
which is then serialized back to native schema YAML.
"""

import logging
from collections import defaultdict
from decimal import Decimal

import yaml

from api_codegen.parser.base import ApiDefinition, FieldDefinition, ValidationConfig
from api_codegen.validator import constants as c
from api_codegen.validator.analyzer import Issue, IssueCode

logger = logging.getLogger(__name__)

IssueKey = tuple[str | None, str, str | None, str | None]


def fix(definition: ApiDefinition, issues: list[Issue]) -> str:
    """Apply fixes for ``issues`` and return the corrected native YAML text."""
    fixed = fix_definition(definition, issues)
    return dump_definition(fixed)


def fix_definition(definition: ApiDefinition, issues: list[Issue]) -> ApiDefinition:
    """Return a fixed deep copy of ``definition``."""
    fixed = definition.model_copy(deep=True)

    by_field: dict[IssueKey, list[Issue]] = defaultdict(list)
    for issue in issues:
        by_field[(issue.api, issue.location, issue.class_name, issue.field_name)].append(issue)

    applied = 0
    for api in fixed.apis:
        for location, class_def in (("request", api.request), ("response", api.response)):
            if class_def is None:
                continue
            applied += _fix_fields(class_def.fields, api.name, location, class_def.class_name, by_field)

    logger.info("Applied %d fix(es) for %d finding(s)", applied, len(issues))
    return fixed


def _fix_fields(
    fields: list[FieldDefinition],
    api_name: str | None,
    location: str,
    class_name: str | None,
    by_field: dict[IssueKey, list[Issue]],
) -> int:
    applied = 0
    for field in fields:
        for issue in by_field.get((api_name, location, class_name, field.name), []):
            if _apply_fix(field, issue):
                applied += 1
        if field.fields:
            applied += _fix_fields(field.fields, api_name, location, f"{class_name}.{field.name}", by_field)
    return applied


def _apply_fix(field: FieldDefinition, issue: Issue) -> bool:
    """Apply the fix for one finding; returns False when the finding has no fix."""
    handler = _FIXES.get(issue.code)
    if handler is None:
        return False
    if field.validation is None:
        field.validation = ValidationConfig()
    changed = handler(field, field.validation)
    if not field.validation.model_dump(exclude_none=True):
        field.validation = None
    return changed


def _set_missing(v: ValidationConfig, **values) -> bool:
    changed = False
    for attr, value in values.items():
        if getattr(v, attr) is None:
            setattr(v, attr, value)
            changed = True
    return changed


def numeric_defaults(name: str | None, base_type: str | None) -> tuple[int, int]:
    """Range to fill in for an unbounded numeric field, chosen by field name then type."""
    lower = (name or "").lower()
    if lower in c.PAGE_FIELD_NAMES:
        return c.PAGE_MIN, c.PAGE_MAX
    if lower in c.PAGE_SIZE_FIELD_NAMES:
        return c.PAGE_SIZE_MIN, c.PAGE_SIZE_MAX
    if c.name_has_word(name, c.AGE_WORDS):
        return c.AGE_MIN, c.AGE_MAX
    if c.name_has_word(name, c.SCORE_WORDS):
        return c.SCORE_MIN, c.SCORE_MAX
    if base_type in c.INTEGER_TYPES:
        return c.DEFAULT_MIN_VALUE, c.DEFAULT_MAX_INTEGER
    return c.DEFAULT_MIN_VALUE, c.DEFAULT_MAX_DECIMAL


def _fix_not_null(field, v):
    return _set_missing(v, not_null=True)


def _fix_string_length(field, v):
    low, high = c.DEFAULT_MIN_LENGTH, c.DEFAULT_MAX_LENGTH
    # A default must never cross the bound the user already set
    if v.max_length is not None:
        low = min(low, v.max_length)
    if v.min_length is not None:
        high = max(high, v.min_length)
    return _set_missing(v, min_length=low, max_length=high)


def _fix_numeric_range(field, v):
    low, high = numeric_defaults(field.name, field.base_type)
    values = {"min": low, "max": high}
    # max must stay strictly greater than min, so a crossing default is dropped
    if v.max is not None and low >= v.max:
        logger.debug("Skipping min default %s for %s: max is %s", low, field.name, v.max)
        del values["min"]
    if v.min is not None and high <= v.min:
        logger.debug("Skipping max default %s for %s: min is %s", high, field.name, v.min)
        del values["max"]
    return _set_missing(v, **values)


def _fix_list_size(field, v):
    low, high = c.DEFAULT_MIN_SIZE, c.DEFAULT_MAX_SIZE
    if v.max_size is not None:
        low = min(low, v.max_size)
    if v.min_size is not None:
        high = max(high, v.min_size)
    return _set_missing(v, min_size=low, max_size=high)


def _fix_email(field, v):
    return _set_missing(v, email=True)


def _fix_phone(field, v):
    # The finding alone is not enough: the name must look like a phone number
    if not c.name_matches(field.name, c.PHONE_TOKENS):
        logger.debug("Skipping phone pattern for %s: name has no phone token", field.name)
        return False
    return _set_missing(v, pattern=c.PHONE_PATTERN)


def _fix_past(field, v):
    return _set_missing(v, past=True)


def _fix_future(field, v):
    return _set_missing(v, future=True)


# Range conflicts (ERROR findings) have no entry: they need a human decision.
_FIXES = {
    IssueCode.MISSING_NOT_NULL: _fix_not_null,
    IssueCode.STRING_NO_LENGTH: _fix_string_length,
    IssueCode.STRING_NO_MAX_LENGTH: _fix_string_length,
    IssueCode.STRING_NO_MIN_LENGTH: _fix_string_length,
    IssueCode.NUMERIC_NO_RANGE: _fix_numeric_range,
    IssueCode.NUMERIC_NO_MAX: _fix_numeric_range,
    IssueCode.NUMERIC_NO_MIN: _fix_numeric_range,
    IssueCode.LIST_NO_SIZE: _fix_list_size,
    IssueCode.LIST_NO_MAX_SIZE: _fix_list_size,
    IssueCode.LIST_NO_MIN_SIZE: _fix_list_size,
    IssueCode.EMAIL_HINT: _fix_email,
    IssueCode.PHONE_HINT: _fix_phone,
    IssueCode.BIRTH_DATE_HINT: _fix_past,
    IssueCode.SCHEDULE_DATE_HINT: _fix_future,
}

FIXABLE_CODES = frozenset(_FIXES)


class _SchemaDumper(yaml.SafeDumper):
    pass


def _represent_float(dumper: yaml.SafeDumper, value: float) -> yaml.Node:
    if value != value or value in (float("inf"), float("-inf")):
        return dumper.represent_float(value)
    if value.is_integer():
        return dumper.represent_int(int(value))
    # repr() keeps the shortest round-trip digits; Decimal renders them without an exponent
    return dumper.represent_scalar("tag:yaml.org,2002:float", format(Decimal(repr(value)), "f"))


_SchemaDumper.add_representer(float, _represent_float)


def dump_definition(definition: ApiDefinition) -> str:
    """Serialize a definition as native schema YAML.

    camelCase keys, unset values omitted, key order preserved, and numbers
    written in plain notation.
    """
    data = definition.model_dump(mode="json", by_alias=True, exclude_none=True)
    return yaml.dump(
        data,
        Dumper=_SchemaDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
