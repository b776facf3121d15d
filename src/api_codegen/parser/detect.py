"""Auto-detect the format of an API description."""

SWAGGER_MARKERS = ("swagger:", "openapi:", '"swagger"', '"openapi"')


def detect_format(text: str | None) -> str:
    """Detect the format of raw API description text.

    Returns: 'swagger' (Swagger 2.0 / OpenAPI 3.x) or 'native'.
    """
    if not text:
        return "native"

    lower = text.lower()
    if any(marker in lower for marker in SWAGGER_MARKERS):
        return "swagger"
    if "info:" in lower and "paths:" in lower:
        return "swagger"

    return "native"
