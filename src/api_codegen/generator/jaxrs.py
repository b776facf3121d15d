"""JAX-RS (Apache CXF) controller emitter."""

from api_codegen.config import FrameworkType
from api_codegen.generator.base import CodeGenerator
from api_codegen.generator.naming import java_string
from api_codegen.parser.base import Api, FieldDefinition

PARAM_ANNOTATIONS = {
    "path": "PathParam",
    "query": "QueryParam",
    "header": "HeaderParam",
    "cookie": "CookieParam",
}


class JaxRsCodeGenerator(CodeGenerator):
    framework = FrameworkType.JAXRS
    controller_imports = ("javax.ws.rs.*", "javax.ws.rs.core.MediaType")

    def class_annotations(self, path: str | None) -> list[str]:
        # JAX-RS root resources need a class-level @Path
        return [f'@Path("{java_string(path or "/")}")']

    def http_annotations(self, api: Api, unified: bool) -> list[str]:
        annotations = [f"@{api.method.value}"]
        if unified:
            annotations.append(f'@Path("{java_string(api.path)}")')
        if api.request and any(f.is_body for f in api.request.fields):
            annotations.append("@Consumes(MediaType.APPLICATION_JSON)")
        annotations.append("@Produces(MediaType.APPLICATION_JSON)")
        return annotations

    def parameter_annotation(self, field: FieldDefinition) -> str:
        annotation = PARAM_ANNOTATIONS.get(field.location, "QueryParam")
        return f'@{annotation}("{java_string(field.name)}")'

    def body_parameter(self, class_name: str) -> str:
        return f"@Valid {class_name} req"

    def return_type(self, response_class: str | None) -> str:
        return response_class or "Void"

    def method_body(self) -> list[str]:
        return ["// TODO: implement business logic", "return null;"]
