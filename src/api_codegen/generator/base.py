"""Emitter interface and the model walk shared by every target framework.

A framework emitter only decides how controllers are annotated and how
parameters are bound. Request/response classes, type tokens and Bean
Validation annotations are the same for every framework and live here.
"""

import logging
import re
from abc import ABC, abstractmethod

from jinja2 import Environment, PackageLoader

from api_codegen.config import CodegenConfig, FrameworkType
from api_codegen.errors import GenerationError
from api_codegen.generator.naming import (
    capitalize,
    controller_class_name,
    decimal_literal,
    is_integral,
    java_identifier,
    java_string,
    javadoc,
    long_literal,
    method_name,
    unified_class_name,
)
from api_codegen.parser.base import (
    Api,
    ApiDefinition,
    ClassDefinition,
    ElementValidationConfig,
    FieldDefinition,
    FieldType,
    TypeKind,
    ValidationConfig,
)

logger = logging.getLogger(__name__)

VALIDATION_PACKAGE = "javax.validation"
CONSTRAINTS_IMPORT = f"{VALIDATION_PACKAGE}.constraints.*"
VALID_IMPORT = f"{VALIDATION_PACKAGE}.Valid"
JSON_PROPERTY_IMPORT = "com.fasterxml.jackson.annotation.JsonProperty"

JAVA_TYPE_IMPORTS = {
    "List": "java.util.List",
    "Date": "java.util.Date",
    "LocalDate": "java.time.LocalDate",
    "LocalDateTime": "java.time.LocalDateTime",
    "BigDecimal": "java.math.BigDecimal",
}


def nested_class_name(field: FieldDefinition) -> str:
    """Class synthesized for a field that carries its own nested fields."""
    return capitalize(java_identifier(field.name))


def java_type(field: FieldDefinition) -> str:
    """Map a field's type tag to the Java type token used in generated code."""
    ref = field.type_ref
    if ref is None:
        return "Object"
    if field.fields:
        synth = nested_class_name(field)
        return f"List<{synth}>" if ref.kind is TypeKind.LIST else synth
    if ref.kind is TypeKind.ENUM:
        return enum_value_type(field)
    if ref.kind is TypeKind.LIST:
        element = _type_token(ref.element)
        element_annotations = element_constraint_annotations(field.validation.element_validation if field.validation else None)
        if element_annotations:
            element = " ".join(element_annotations) + " " + element
        return f"List<{element}>"
    return ref.name


def _type_token(ref: FieldType | None) -> str:
    if ref is None:
        return "Object"
    if ref.kind is TypeKind.LIST:
        return f"List<{_type_token(ref.element)}>"
    if ref.kind is TypeKind.ENUM:
        return "String"
    return ref.name


def enum_value_type(field: FieldDefinition) -> str:
    """Enums are carried as their value type: Integer when the first value is an int."""
    if field.enum_values:
        first = field.enum_values[0]
        if isinstance(first, int) and not isinstance(first, bool):
            return "Integer"
    return "String"


def _size(low, high) -> str | None:
    args = []
    if low is not None:
        args.append(f"min = {low}")
    if high is not None:
        args.append(f"max = {high}")
    return f"@Size({', '.join(args)})" if args else None


def _bound(kind: str, value: int | float) -> str:
    if is_integral(value):
        return f"@{kind}({long_literal(value)})"
    return f'@Decimal{kind}("{decimal_literal(value)}")'


def constraint_annotations(field: FieldDefinition) -> list[str]:
    """Bean Validation annotations for a field, in a fixed order.

    Presence, then size, then range, then pattern, then format, then time.
    """
    v = field.validation or ValidationConfig()
    annotations = []

    if field.required or v.not_null:
        annotations.append("@NotBlank" if field.is_string else "@NotNull")

    size = None
    if field.is_list:
        size = _size(v.min_size, v.max_size)
    elif field.is_string:
        size = _size(v.min_length, v.max_length)
    if size:
        annotations.append(size)

    if field.is_numeric:
        if v.min is not None:
            annotations.append(_bound("Min", v.min))
        if v.max is not None:
            annotations.append(_bound("Max", v.max))

    if v.pattern:
        annotations.append(f'@Pattern(regexp = "{java_string(v.pattern)}")')
    if v.email:
        annotations.append("@Email")

    if field.is_date:
        if v.past:
            annotations.append("@Past")
        if v.future:
            annotations.append("@Future")

    return annotations


def element_constraint_annotations(ev: ElementValidationConfig | None) -> list[str]:
    """Type-use annotations applied to each element of a collection."""
    if ev is None:
        return []
    annotations = []
    size = _size(ev.min_length, ev.max_length)
    if size:
        annotations.append(size)
    if ev.min is not None:
        annotations.append(_bound("Min", ev.min))
    if ev.max is not None:
        annotations.append(_bound("Max", ev.max))
    if ev.pattern:
        annotations.append(f'@Pattern(regexp = "{java_string(ev.pattern)}")')
    if ev.email:
        annotations.append("@Email")
    return annotations


def type_imports(token: str) -> set[str]:
    """Imports needed by the JDK types appearing in a Java type token."""
    return {JAVA_TYPE_IMPORTS[name] for name in re.findall(r"[A-Za-z_]\w*", token) if name in JAVA_TYPE_IMPORTS}


class CodeGenerator(ABC):
    """Emitter for one target framework.

    Every ``generate_*`` method returns ``{file name: file content}``.
    """

    framework: FrameworkType
    controller_imports: tuple[str, ...] = ()

    def __init__(self):
        self.env = Environment(
            loader=PackageLoader("api_codegen", "templates"),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["javadoc"] = javadoc

    # Framework hooks

    @abstractmethod
    def class_annotations(self, path: str | None) -> list[str]:
        """Controller class annotations; ``path`` is None for the unified controller."""

    @abstractmethod
    def http_annotations(self, api: Api, unified: bool) -> list[str]:
        """Verb/routing annotations for one handler method."""

    @abstractmethod
    def parameter_annotation(self, field: FieldDefinition) -> str:
        """Binding annotation for a path/query/header/cookie parameter."""

    @abstractmethod
    def body_parameter(self, class_name: str) -> str:
        """The parameter declaration that receives the request body."""

    @abstractmethod
    def return_type(self, response_class: str | None) -> str: ...

    @abstractmethod
    def method_body(self) -> list[str]: ...

    # Controllers

    def generate_controller(self, api: Api, config: CodegenConfig) -> dict[str, str]:
        class_name = controller_class_name(api.name)
        method, imports = self._build_method(api, config, unified=False)
        class_annotations = self.class_annotations(api.path) + list(config.class_annotations) + list(api.class_annotations or [])
        content = self._render_controller(class_name, class_annotations, [method], imports, config, doc=None)
        return {f"{class_name}.java": content}

    def generate_controllers(self, definition: ApiDefinition, config: CodegenConfig) -> dict[str, str]:
        """Unified mode: a single controller holding every endpoint."""
        class_name = unified_class_name(config.package)
        content = self._render_group(class_name, definition.apis, config, doc="Unified API controller")
        return {f"{class_name}.java": content}

    def generate_grouped_controllers(self, definition: ApiDefinition, config: CodegenConfig) -> dict[str, str]:
        """Per-endpoint mode: one controller per class name.

        Endpoints that map to the same controller class (``createUser`` and
        ``createOrder`` both map to ``CreateController``) are merged into one
        file, each method carrying its own path.
        """
        groups: dict[str, list[Api]] = {}
        for api in definition.apis:
            groups.setdefault(controller_class_name(api.name), []).append(api)

        files: dict[str, str] = {}
        for class_name, apis in groups.items():
            if len(apis) == 1:
                files.update(self.generate_controller(apis[0], config))
            else:
                logger.debug("Merging %d endpoints into %s", len(apis), class_name)
                files[f"{class_name}.java"] = self._render_group(class_name, apis, config, doc=None)
        return files

    def _render_group(self, class_name: str, apis: list[Api], config: CodegenConfig, doc: str | None) -> str:
        methods = []
        used_names: set[str] = set()
        imports: set[str] = set()
        extra_annotations: list[str] = []
        for api in apis:
            method, method_imports = self._build_method(api, config, unified=True)
            if method["name"] in used_names:
                method["name"] = java_identifier(api.name)
            used_names.add(method["name"])
            methods.append(method)
            imports |= method_imports
            for annotation in api.class_annotations or []:
                if annotation not in extra_annotations:
                    extra_annotations.append(annotation)

        class_annotations = self.class_annotations(None) + list(config.class_annotations) + extra_annotations
        return self._render_controller(class_name, class_annotations, methods, imports, config, doc=doc)

    def _build_method(self, api: Api, config: CodegenConfig, unified: bool) -> tuple[dict, set[str]]:
        imports = set(self.controller_imports)
        params = []
        has_body = False

        request = api.request
        for field in request.fields if request else []:
            if field.is_body:
                has_body = True
                continue
            token = java_type(field)
            constraints = constraint_annotations(field)
            imports |= type_imports(token)
            if constraints or "@" in token:
                imports.add(CONSTRAINTS_IMPORT)
            params.append(" ".join([self.parameter_annotation(field), *constraints, token, java_identifier(field.name)]))

        if has_body:
            params.append(self.body_parameter(request.class_name))
            imports.add(VALID_IMPORT)
            imports.add(f"{config.request_package}.{request.class_name}")

        response_class = api.response.class_name if api.response else None
        if response_class:
            imports.add(f"{config.response_package}.{response_class}")

        method = {
            "doc": api.description or api.name,
            "annotations": [
                *config.method_annotations,
                *(api.method_annotations or []),
                *(api.annotations or []),
                *self.http_annotations(api, unified),
            ],
            "return_type": self.return_type(response_class),
            "name": method_name(api.name),
            "params": params,
            "body": self.method_body(),
        }
        return method, imports

    def _render_controller(
        self,
        class_name: str,
        class_annotations: list[str],
        methods: list[dict],
        imports: set[str],
        config: CodegenConfig,
        doc: str | None,
    ) -> str:
        template = self.env.get_template("controller.java.j2")
        return template.render(
            copyright=_copyright(config),
            package=config.controller_package,
            imports=sorted(imports),
            doc=doc,
            class_annotations=class_annotations,
            class_name=class_name,
            methods=methods,
        )

    # Request / response classes

    def generate_request(self, api: Api, config: CodegenConfig) -> dict[str, str]:
        if api.request is None:
            return {}
        return self._generate_classes(api.request, config.request_package, config)

    def generate_response(self, api: Api, config: CodegenConfig) -> dict[str, str]:
        if api.response is None:
            return {}
        return self._generate_classes(api.response, config.response_package, config)

    def _generate_classes(self, class_def: ClassDefinition, package: str, config: CodegenConfig) -> dict[str, str]:
        files: dict[str, str] = {}
        self._emit_class(class_def.class_name, class_def.fields, package, config, files)
        logger.debug("Rendered %d class file(s) for %s", len(files), class_def.class_name)
        return files

    def _emit_class(
        self, class_name: str, fields: list[FieldDefinition], package: str, config: CodegenConfig, files: dict[str, str]
    ) -> None:
        # No cycle guard: callers validate first, which rejects cyclic nesting
        file_name = f"{class_name}.java"
        content = self.render_model(class_name, fields, package, config)
        if files.get(file_name, content) != content:
            raise GenerationError(
                f"Nested classes named {class_name} in {package} have different fields; rename one of the fields"
            )
        files[file_name] = content
        for field in fields:
            if field.fields:
                self._emit_class(nested_class_name(field), field.fields, package, config, files)

    def render_model(self, class_name: str, fields: list[FieldDefinition], package: str, config: CodegenConfig) -> str:
        imports = {"lombok.Data"}
        rendered = []
        for field in fields:
            token = java_type(field)
            name = java_identifier(field.name)
            annotations = []
            if name != field.name:
                annotations.append(f'@JsonProperty("{java_string(field.name)}")')
                imports.add(JSON_PROPERTY_IMPORT)
            constraints = constraint_annotations(field)
            annotations.extend(constraints)
            if constraints or "@" in token:
                imports.add(CONSTRAINTS_IMPORT)
            if field.fields:
                annotations.append("@Valid")
                imports.add(VALID_IMPORT)
            imports |= type_imports(token)
            rendered.append(
                {"name": name, "java_type": token, "annotations": annotations, "description": field.description}
            )

        template = self.env.get_template("model.java.j2")
        return template.render(
            copyright=_copyright(config),
            package=package,
            imports=sorted(imports),
            class_name=class_name,
            fields=rendered,
        )


def _copyright(config: CodegenConfig) -> str | None:
    if config.copyright and config.copyright.strip():
        return config.copyright.strip()
    return None
