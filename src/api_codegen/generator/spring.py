"""Spring MVC controller emitter."""

from api_codegen.config import FrameworkType
from api_codegen.generator.base import CodeGenerator
from api_codegen.generator.naming import java_string
from api_codegen.parser.base import Api, FieldDefinition, HttpMethod

PARAM_ANNOTATIONS = {
    "path": "PathVariable",
    "query": "RequestParam",
    "header": "RequestHeader",
    "cookie": "CookieValue",
}

MAPPING_ANNOTATIONS = {
    HttpMethod.GET: "GetMapping",
    HttpMethod.POST: "PostMapping",
    HttpMethod.PUT: "PutMapping",
    HttpMethod.DELETE: "DeleteMapping",
    HttpMethod.PATCH: "PatchMapping",
}


class SpringCodeGenerator(CodeGenerator):
    framework = FrameworkType.SPRING
    controller_imports = (
        "org.springframework.http.ResponseEntity",
        "org.springframework.validation.annotation.Validated",
        "org.springframework.web.bind.annotation.*",
    )

    def class_annotations(self, path: str | None) -> list[str]:
        annotations = ["@RestController"]
        if path is not None:
            annotations.append(f'@RequestMapping("{java_string(path)}")')
        # Needed for constraints on individual handler parameters
        annotations.append("@Validated")
        return annotations

    def http_annotations(self, api: Api, unified: bool) -> list[str]:
        mapping = MAPPING_ANNOTATIONS[api.method]
        if unified:
            return [f'@{mapping}("{java_string(api.path)}")']
        return [f"@{mapping}"]

    def parameter_annotation(self, field: FieldDefinition) -> str:
        annotation = PARAM_ANNOTATIONS.get(field.location, "RequestParam")
        name = java_string(field.name)
        if field.location == "path" or field.required:
            return f'@{annotation}("{name}")'
        return f'@{annotation}(value = "{name}", required = false)'

    def body_parameter(self, class_name: str) -> str:
        return f"@Valid @RequestBody {class_name} req"

    def return_type(self, response_class: str | None) -> str:
        return f"ResponseEntity<{response_class or 'Void'}>"

    def method_body(self) -> list[str]:
        return ["// TODO: implement business logic", "return ResponseEntity.ok().build();"]
