"""Heuristic analysis of field constraints.

Unlike structural validation, findings here never block generation. They
flag constraints that are missing or suspicious, graded by severity, and
each one carries an IssueCode the fixer dispatches on.
"""

import logging
from enum import Enum
from typing import Iterable

from pydantic import BaseModel

from api_codegen.parser.base import ApiDefinition, ClassDefinition, FieldDefinition, ValidationConfig
from api_codegen.validator.constants import (
    BIRTH_TOKENS,
    EMAIL_TOKENS,
    PHONE_TOKENS,
    SCHEDULE_TOKENS,
    name_matches,
)

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class IssueCode(str, Enum):
    MISSING_NOT_NULL = "missing_not_null"
    STRING_NO_LENGTH = "string_no_length"
    STRING_NO_MAX_LENGTH = "string_no_max_length"
    STRING_NO_MIN_LENGTH = "string_no_min_length"
    STRING_LENGTH_CONFLICT = "string_length_conflict"
    NUMERIC_NO_RANGE = "numeric_no_range"
    NUMERIC_NO_MAX = "numeric_no_max"
    NUMERIC_NO_MIN = "numeric_no_min"
    NUMERIC_RANGE_CONFLICT = "numeric_range_conflict"
    NUMERIC_NEGATIVE_MIN = "numeric_negative_min"
    LIST_NO_SIZE = "list_no_size"
    LIST_NO_MAX_SIZE = "list_no_max_size"
    LIST_NO_MIN_SIZE = "list_no_min_size"
    LIST_SIZE_CONFLICT = "list_size_conflict"
    LIST_MAX_SIZE_NOT_POSITIVE = "list_max_size_not_positive"
    DATE_PAST_AND_FUTURE = "date_past_and_future"
    BIRTH_DATE_HINT = "birth_date_hint"
    SCHEDULE_DATE_HINT = "schedule_date_hint"
    EMAIL_HINT = "email_hint"
    PHONE_HINT = "phone_hint"


_SEVERITY_TAGS = {Severity.ERROR: "[ERROR]", Severity.WARNING: "[WARN]", Severity.INFO: "[INFO]"}


class Issue(BaseModel):
    """A single analysis finding, attributed to one field at one nesting level.

    ``class_name`` is qualified for nested fields (``CreateUserReq.address``).
    """

    api: str | None
    location: str  # request / response
    class_name: str | None
    field_name: str | None
    field_type: str | None
    code: IssueCode
    message: str
    suggestion: str
    severity: Severity

    def __str__(self) -> str:
        return (
            f"{_SEVERITY_TAGS[self.severity]} {self.class_name}.{self.field_name} "
            f"({self.field_type}): {self.message} - {self.suggestion}"
        )


class AnalysisSummary(BaseModel):
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    total_count: int = 0

    @property
    def has_issues(self) -> bool:
        return self.total_count > 0

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


def analyze(definition: ApiDefinition) -> list[Issue]:
    """Run every heuristic rule over all request and response fields."""
    issues: list[Issue] = []
    for api in definition.apis:
        if api.request is not None:
            _analyze_class(api.name, "request", api.request, issues)
        if api.response is not None:
            _analyze_class(api.name, "response", api.response, issues)

    logger.debug("Analysis produced %d finding(s)", len(issues))
    return issues


def summarize(source: ApiDefinition | Iterable[Issue]) -> AnalysisSummary:
    """Tally findings per severity, analyzing first when given a definition."""
    issues = analyze(source) if isinstance(source, ApiDefinition) else list(source)
    return AnalysisSummary(
        error_count=sum(1 for i in issues if i.severity is Severity.ERROR),
        warning_count=sum(1 for i in issues if i.severity is Severity.WARNING),
        info_count=sum(1 for i in issues if i.severity is Severity.INFO),
        total_count=len(issues),
    )


def _analyze_class(api_name: str | None, location: str, class_def: ClassDefinition, issues: list[Issue]) -> None:
    for field in class_def.fields:
        _analyze_field(api_name, location, class_def.class_name, field, issues)


def _analyze_field(
    api_name: str | None, location: str, class_name: str | None, field: FieldDefinition, issues: list[Issue]
) -> None:
    def report(code: IssueCode, severity: Severity, message: str, suggestion: str) -> None:
        issues.append(
            Issue(
                api=api_name,
                location=location,
                class_name=class_name,
                field_name=field.name,
                field_type=field.type,
                code=code,
                message=message,
                suggestion=suggestion,
                severity=severity,
            )
        )

    v = field.validation or ValidationConfig()

    if field.required and not _has_presence_constraint(field, v):
        report(
            IssueCode.MISSING_NOT_NULL,
            Severity.ERROR,
            "Required field has no @NotNull/@NotBlank constraint",
            "Set validation.notNull=true",
        )

    if field.is_string:
        if name_matches(field.name, EMAIL_TOKENS) and v.email is None:
            report(IssueCode.EMAIL_HINT, Severity.INFO, "Email field should be validated as an email", "Set validation.email=true")
        if name_matches(field.name, PHONE_TOKENS) and v.pattern is None:
            report(
                IssueCode.PHONE_HINT,
                Severity.INFO,
                "Phone field should be validated with a pattern",
                "Set validation.pattern to a phone number regex",
            )

    if field.is_list:
        _analyze_list(v, report)
    elif field.is_string:
        _analyze_string(v, report)
    elif field.is_numeric:
        _analyze_numeric(v, report)
    elif field.is_date:
        _analyze_date(field, v, report)

    if field.fields:
        nested_class = f"{class_name}.{field.name}"
        for child in field.fields:
            _analyze_field(api_name, location, nested_class, child, issues)


def _has_presence_constraint(field: FieldDefinition, v: ValidationConfig) -> bool:
    if v.not_null:
        return True
    if field.is_string and v.min_length is not None and v.min_length >= 1:
        return True
    if field.is_list and v.min_size is not None and v.min_size >= 1:
        return True
    return False


def _analyze_string(v: ValidationConfig, report) -> None:
    if v.min_length is None and v.max_length is None:
        report(
            IssueCode.STRING_NO_LENGTH,
            Severity.WARNING,
            "String field has no length constraint",
            "Add validation.minLength and validation.maxLength",
        )
    elif v.max_length is None:
        report(IssueCode.STRING_NO_MAX_LENGTH, Severity.INFO, "String field has minLength but no maxLength", "Add validation.maxLength")
    elif v.min_length is None:
        report(IssueCode.STRING_NO_MIN_LENGTH, Severity.INFO, "String field has maxLength but no minLength", "Add validation.minLength")
    elif v.min_length > v.max_length:
        report(
            IssueCode.STRING_LENGTH_CONFLICT,
            Severity.ERROR,
            "minLength must not be greater than maxLength",
            "Make validation.minLength <= validation.maxLength",
        )


def _analyze_numeric(v: ValidationConfig, report) -> None:
    if v.min is None and v.max is None:
        report(
            IssueCode.NUMERIC_NO_RANGE,
            Severity.WARNING,
            "Numeric field has no range constraint",
            "Add validation.min and validation.max",
        )
    elif v.max is None:
        report(IssueCode.NUMERIC_NO_MAX, Severity.INFO, "Numeric field has min but no max", "Add validation.max")
    elif v.min is None:
        report(IssueCode.NUMERIC_NO_MIN, Severity.INFO, "Numeric field has max but no min", "Add validation.min")
    elif v.min > v.max:
        report(
            IssueCode.NUMERIC_RANGE_CONFLICT,
            Severity.ERROR,
            "min must not be greater than max",
            "Make validation.min <= validation.max",
        )

    if v.min is not None and v.min < 0:
        report(
            IssueCode.NUMERIC_NEGATIVE_MIN,
            Severity.INFO,
            "Numeric field allows negative values",
            "Set validation.min to 0 for non-negative values",
        )


def _analyze_list(v: ValidationConfig, report) -> None:
    if v.min_size is None and v.max_size is None:
        report(
            IssueCode.LIST_NO_SIZE,
            Severity.WARNING,
            "List field has no size constraint",
            "Add validation.minSize and validation.maxSize",
        )
    elif v.max_size is None:
        report(IssueCode.LIST_NO_MAX_SIZE, Severity.INFO, "List field has minSize but no maxSize", "Add validation.maxSize")
    elif v.min_size is None:
        report(IssueCode.LIST_NO_MIN_SIZE, Severity.INFO, "List field has maxSize but no minSize", "Add validation.minSize")
    elif v.min_size > v.max_size:
        report(
            IssueCode.LIST_SIZE_CONFLICT,
            Severity.ERROR,
            "minSize must not be greater than maxSize",
            "Make validation.minSize <= validation.maxSize",
        )

    if v.max_size is not None and v.max_size <= 0:
        report(
            IssueCode.LIST_MAX_SIZE_NOT_POSITIVE,
            Severity.ERROR,
            "maxSize must be greater than 0",
            "Set validation.maxSize > 0",
        )


def _analyze_date(field: FieldDefinition, v: ValidationConfig, report) -> None:
    if v.past and v.future:
        report(
            IssueCode.DATE_PAST_AND_FUTURE,
            Severity.ERROR,
            "past and future cannot both be true",
            "Keep only one of validation.past / validation.future",
        )
        return

    if v.past is not None or v.future is not None:
        return
    if name_matches(field.name, BIRTH_TOKENS):
        report(
            IssueCode.BIRTH_DATE_HINT,
            Severity.INFO,
            "Birth date field should only accept past dates",
            "Set validation.past=true",
        )
    elif name_matches(field.name, SCHEDULE_TOKENS):
        report(
            IssueCode.SCHEDULE_DATE_HINT,
            Severity.INFO,
            "Scheduled date field should only accept future dates",
            "Set validation.future=true",
        )
