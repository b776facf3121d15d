"""Validate-then-generate in one call, with files keyed by their package path."""

import logging

from pydantic import BaseModel

from api_codegen.config import CodegenConfig
from api_codegen.errors import GenerationError
from api_codegen.generator.factory import get_generator
from api_codegen.generator.naming import package_path
from api_codegen.parser.base import ApiDefinition
from api_codegen.validator.structure import validate

logger = logging.getLogger(__name__)


class GeneratedArtifacts(BaseModel):
    """Generated sources keyed by ``<package path>/<file name>``."""

    controllers: dict[str, str] = {}
    requests: dict[str, str] = {}
    responses: dict[str, str] = {}

    def all_files(self) -> dict[str, str]:
        return {**self.controllers, **self.requests, **self.responses}


def generate_all(definition: ApiDefinition, config: CodegenConfig | None = None) -> GeneratedArtifacts:
    """Generate controllers, requests and responses for every endpoint.

    Raises GenerationError, carrying the ValidationResult, when the definition
    fails structural validation; nothing is generated in that case. Also
    raises GenerationError when two endpoints would produce the same file
    with different content.
    """
    config = config or CodegenConfig()
    result = validate(definition)
    if not result.valid:
        raise GenerationError(f"API definition is invalid:\n{result.error_message()}", result=result)

    generator = get_generator(config)
    artifacts = GeneratedArtifacts()

    if config.unified_controller:
        controllers = generator.generate_controllers(definition, config)
    else:
        controllers = generator.generate_grouped_controllers(definition, config)
    _collect(artifacts.controllers, controllers, config.controller_package)
    for api in definition.apis:
        _collect(artifacts.requests, generator.generate_request(api, config), config.request_package)
        _collect(artifacts.responses, generator.generate_response(api, config), config.response_package)

    logger.info(
        "Generated %d controller(s), %d request(s), %d response(s)",
        len(artifacts.controllers),
        len(artifacts.requests),
        len(artifacts.responses),
    )
    return artifacts


def _collect(target: dict[str, str], files: dict[str, str], package: str) -> None:
    prefix = package_path(package)
    for name, content in files.items():
        key = f"{prefix}/{name}"
        if target.get(key, content) != content:
            raise GenerationError(f"{key} would be generated twice with different content; rename one of the classes")
        target[key] = content
