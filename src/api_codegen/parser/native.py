"""Reader for the native API schema format.

The native format maps one-to-one onto the canonical model::

    apis:
      - name: createUser
        path: /api/users
        method: POST
        request:
          className: CreateUserReq
          fields:
            - name: username
              type: String
              required: true
              validation:
                minLength: 4
"""

import logging

import yaml
from pydantic import ValidationError

from api_codegen.errors import ParseError
from api_codegen.parser.base import ApiDefinition, HttpMethod

logger = logging.getLogger(__name__)


def parse_native(text: str) -> ApiDefinition:
    """Parse native schema text into an ApiDefinition."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise _yaml_error(e) from e

    if data is None:
        raise ParseError("Document is empty")
    if not isinstance(data, dict):
        raise ParseError("Document root must be a mapping with an 'apis' list")
    if "apis" not in data:
        raise ParseError("Missing 'apis' list", field="apis")
    if data["apis"] is None:
        data["apis"] = []

    try:
        return ApiDefinition.model_validate(data)
    except ValidationError as e:
        raise _model_error(e, text) from e


def _yaml_error(e: yaml.YAMLError) -> ParseError:
    mark = getattr(e, "problem_mark", None)
    problem = getattr(e, "problem", None) or str(e)
    if mark is None:
        return ParseError(f"YAML syntax error: {problem}")
    line = mark.line + 1
    return ParseError(f"YAML syntax error at line {line}: {problem}", line=line)


def _model_error(e: ValidationError, text: str) -> ParseError:
    errors = e.errors()
    first = errors[0]
    loc = first["loc"]
    field = format_loc(loc)
    line = _find_line(text, loc)

    where = f"{field} (line {line})" if line else field
    message = f"Invalid value at {where}: {first['msg']}"
    if loc and loc[-1] == "method":
        allowed = ", ".join(m.value for m in HttpMethod)
        message += f"\nHint: method must be one of {allowed}"
    if len(errors) > 1:
        message += f"\n({len(errors) - 1} more error(s) not shown)"
    return ParseError(message, line=line, field=field)


def format_loc(loc: tuple) -> str:
    """Render a pydantic error location as ``apis[0].request.fields[1].type``."""
    parts = ""
    for item in loc:
        if isinstance(item, int):
            parts += f"[{item}]"
        elif parts:
            parts += f".{item}"
        else:
            parts = str(item)
    return parts


def _find_line(text: str, loc: tuple) -> int | None:
    """Return the 1-based line of the deepest YAML node reachable along ``loc``."""
    try:
        node = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError:
        return None
    if node is None:
        return None

    for item in loc:
        child = None
        if isinstance(node, yaml.MappingNode):
            for key_node, value_node in node.value:
                if key_node.value == item:
                    child = value_node
                    break
        elif isinstance(node, yaml.SequenceNode) and isinstance(item, int):
            if item < len(node.value):
                child = node.value[item]
        if child is None:
            break
        node = child

    return node.start_mark.line + 1
