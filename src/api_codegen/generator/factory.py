"""Select the emitter for the configured framework."""

from api_codegen.config import CodegenConfig, FrameworkType
from api_codegen.generator.base import CodeGenerator
from api_codegen.generator.jaxrs import JaxRsCodeGenerator
from api_codegen.generator.spring import SpringCodeGenerator

GENERATORS: dict[FrameworkType, type[CodeGenerator]] = {
    FrameworkType.JAXRS: JaxRsCodeGenerator,
    FrameworkType.SPRING: SpringCodeGenerator,
}


def get_generator(config: CodegenConfig | None = None) -> CodeGenerator:
    """Return a new emitter for ``config.framework`` (JAX-RS when no config is given).

    Raises ValueError for a framework without an emitter.
    """
    if config is None:
        return JaxRsCodeGenerator()
    framework = FrameworkType(config.framework)
    try:
        generator_cls = GENERATORS[framework]
    except KeyError:
        raise ValueError(f"Unsupported framework: {config.framework}") from None
    return generator_cls()
