"""Code generation settings.

Loaded from a YAML file with camelCase keys::

    framework: spring
    basePackage: com.example.order
    copyright: Copyright (c) 2026 Example Corp.
    unifiedController: true
    classAnnotations:
      - '@Slf4j'
    methodAnnotations:
      - '@Timed'
"""

import logging
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from api_codegen.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_PACKAGE = "com.apicgen"


class FrameworkType(str, Enum):
    JAXRS = "jaxrs"
    SPRING = "spring"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            if key == "cxf":
                return cls.JAXRS
            for member in cls:
                if member.value == key:
                    return member
        return None


class CodegenConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    framework: FrameworkType = FrameworkType.JAXRS
    base_package: str = DEFAULT_BASE_PACKAGE
    copyright: str | None = None
    class_annotations: list[str] = []
    method_annotations: list[str] = []
    unified_controller: bool = False

    @model_validator(mode="before")
    @classmethod
    def _flatten_legacy_keys(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # Older config files nest the annotation lists under customAnnotations
        custom = data.pop("customAnnotations", None)
        if isinstance(custom, dict):
            data.setdefault("classAnnotations", custom.get("classAnnotations") or [])
            data.setdefault("methodAnnotations", custom.get("methodAnnotations") or [])
        # ...and spell the copyright as {company, startYear}
        copyright = data.get("copyright")
        if isinstance(copyright, dict):
            company = str(copyright.get("company") or "").strip()
            year = copyright.get("startYear")
            data["copyright"] = f"Copyright (c) {year} {company}".strip() if year and company else company
        return data

    @property
    def package(self) -> str:
        return self.base_package.strip() or DEFAULT_BASE_PACKAGE

    @property
    def controller_package(self) -> str:
        return f"{self.package}.api"

    @property
    def request_package(self) -> str:
        return f"{self.package}.req"

    @property
    def response_package(self) -> str:
        return f"{self.package}.rsp"


def load_config(path: Path | None = None) -> CodegenConfig:
    """Load settings from a YAML file; no path means defaults."""
    if path is None:
        return CodegenConfig()
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: config root must be a mapping")

    try:
        config = CodegenConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e

    logger.debug("Loaded config from %s (framework=%s)", path, config.framework.value)
    return config
