"""Entry points that turn raw text or files into an ApiDefinition."""

import logging
from pathlib import Path

from api_codegen.errors import ParseError
from api_codegen.parser.base import ApiDefinition
from api_codegen.parser.detect import detect_format
from api_codegen.parser.native import parse_native
from api_codegen.parser.swagger import parse_swagger

logger = logging.getLogger(__name__)

FORMATS = ("auto", "native", "swagger")


def parse(raw_text: str, fmt: str = "auto") -> ApiDefinition:
    """Parse API description text, dispatching on the detected format.

    Raises ParseError when the document cannot be converted; no partial
    definition is ever returned.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format: {fmt}")
    if fmt == "auto":
        fmt = detect_format(raw_text)

    if fmt == "swagger":
        logger.info("Detected Swagger/OpenAPI document, converting")
        definition = parse_swagger(raw_text)
    else:
        definition = parse_native(raw_text)

    logger.info("Parsed %d API(s)", len(definition.apis))
    return definition


def parse_file(file_path: Path, fmt: str = "auto") -> ApiDefinition:
    """Read a file and parse it; the file path is prefixed to error messages."""
    text = file_path.read_text(encoding="utf-8")
    try:
        return parse(text, fmt)
    except ParseError as e:
        raise ParseError(f"{file_path}: {e}", line=e.line, field=e.field) from e
