from pathlib import Path

import pytest

from api_codegen.config import CodegenConfig, FrameworkType, load_config
from api_codegen.errors import ConfigError

FIXTURES = Path(__file__).parent / "fixtures"


class TestFrameworkType:
    def test_values(self):
        assert FrameworkType("jaxrs") is FrameworkType.JAXRS
        assert FrameworkType("spring") is FrameworkType.SPRING

    def test_aliases(self):
        assert FrameworkType("cxf") is FrameworkType.JAXRS
        assert FrameworkType("Spring") is FrameworkType.SPRING

    def test_unknown(self):
        with pytest.raises(ValueError):
            FrameworkType("struts")


class TestCodegenConfig:
    def test_defaults(self):
        config = CodegenConfig()
        assert config.framework is FrameworkType.JAXRS
        assert config.controller_package == "com.apicgen.api"
        assert config.request_package == "com.apicgen.req"
        assert config.response_package == "com.apicgen.rsp"
        assert config.copyright is None
        assert not config.unified_controller

    def test_blank_base_package_falls_back(self):
        assert CodegenConfig(base_package="  ").controller_package == "com.apicgen.api"

    def test_legacy_custom_annotations(self):
        config = CodegenConfig.model_validate(
            {"customAnnotations": {"classAnnotations": ["@Slf4j"], "methodAnnotations": ["@Timed"]}}
        )
        assert config.class_annotations == ["@Slf4j"]
        assert config.method_annotations == ["@Timed"]

    def test_legacy_copyright(self):
        config = CodegenConfig.model_validate({"copyright": {"company": "Example Corp.", "startYear": 2026}})
        assert config.copyright == "Copyright (c) 2026 Example Corp."


class TestLoadConfig:
    def test_no_path(self):
        assert load_config(None) == CodegenConfig()

    def test_fixture(self):
        config = load_config(FIXTURES / "codegen.yaml")
        assert config.framework is FrameworkType.SPRING
        assert config.base_package == "com.example.shop"
        assert config.copyright == "Copyright (c) 2026 Example Corp."
        assert config.class_annotations == ["@Slf4j"]
        assert config.method_annotations == ["@Timed"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "codegen.yaml"
        path.write_text("")
        assert load_config(path) == CodegenConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "codegen.yaml"
        path.write_text("framework: [spring\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "codegen.yaml"
        path.write_text("- spring\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_unknown_framework(self, tmp_path):
        path = tmp_path / "codegen.yaml"
        path.write_text("framework: struts\n")
        with pytest.raises(ConfigError):
            load_config(path)
