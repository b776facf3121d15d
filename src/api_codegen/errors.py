"""Exception types raised by the code generation pipeline."""


class CodegenError(Exception):
    """Base class for all api-codegen errors."""


class ParseError(CodegenError, ValueError):
    """Raised when an input document cannot be turned into an ApiDefinition."""

    def __init__(self, message: str, line: int | None = None, field: str | None = None):
        super().__init__(message)
        self.line = line
        self.field = field


class ConfigError(CodegenError):
    """Raised when a configuration file cannot be read."""


class GenerationError(CodegenError):
    """Raised when code generation is requested for an invalid definition."""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result
