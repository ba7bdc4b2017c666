import json

from apidocx.generator.template_data import (
    format_example,
    serialize_page_data,
    to_template_data,
)
from apidocx.model.base import (
    ApiDocumentation,
    ControllerDoc,
    EndpointDoc,
    ParameterDoc,
    ParameterRole,
    ResponseDoc,
    ValidationConstraint,
)


def _doc() -> ApiDocumentation:
    path_var = ParameterDoc(
        name="id",
        type="int",
        required=True,
        role=ParameterRole.PATH_VARIABLE,
        constraints=[ValidationConstraint(name="Positive", description="Must be a positive number")],
    )
    body = ParameterDoc(name="user", type="User", role=ParameterRole.REQUEST_BODY, example='{"a":1}')
    endpoint = EndpointDoc(
        name="update",
        http_method="PUT",
        url="/api/users/{id}",
        parameters=[path_var, body],
        path_variables=[path_var],
        request_body=body,
        responses=[ResponseDoc(status_code=200, description="Updated")],
        deprecated=True,
        api_note="careful",
    )
    return ApiDocumentation(
        title="Shop",
        version="3.1",
        description="Shop API",
        base_url="https://shop.example.com",
        controllers=[
            ControllerDoc(name="UserController", class_name="shop.UserController", endpoints=[endpoint]),
            ControllerDoc(name="OrderController", class_name="shop.OrderController"),
        ],
    )


class TestToTemplateData:
    def test_top_level_keys(self):
        data = to_template_data(_doc())
        assert data["title"] == "Shop"
        assert data["version"] == "3.1"
        assert data["description"] == "Shop API"
        assert data["baseUrl"] == "https://shop.example.com"
        assert [c["name"] for c in data["controllers"]] == ["UserController", "OrderController"]

    def test_controllers_subset(self):
        doc = _doc()
        data = to_template_data(doc, [doc.controllers[1]])
        assert [c["name"] for c in data["controllers"]] == ["OrderController"]

    def test_endpoint_shape(self):
        endpoint = to_template_data(_doc())["controllers"][0]["endpoints"][0]
        assert endpoint["httpMethod"] == "PUT"
        assert endpoint["url"] == "/api/users/{id}"
        assert endpoint["pathVariables"][0]["name"] == "id"
        assert endpoint["pathVariables"][0]["constraints"] == [
            {"name": "Positive", "description": "Must be a positive number"}
        ]
        assert endpoint["queryParameters"] == []
        assert endpoint["responses"] == [
            {"statusCode": 200, "description": "Updated", "mediaType": None, "example": None}
        ]
        assert endpoint["deprecated"] is True
        assert endpoint["apiNote"] == "careful"
        assert "parameters" not in endpoint

    def test_request_body_example_is_pretty_printed(self):
        endpoint = to_template_data(_doc())["controllers"][0]["endpoints"][0]
        assert endpoint["requestBody"]["example"] == '{\n  "a": 1\n}'

    def test_endpoint_without_body_has_no_request_body_key(self):
        doc = ApiDocumentation(
            controllers=[
                ControllerDoc(
                    name="A",
                    class_name="A",
                    endpoints=[EndpointDoc(name="x", http_method="GET", url="/x")],
                )
            ]
        )
        endpoint = to_template_data(doc)["controllers"][0]["endpoints"][0]
        assert "requestBody" not in endpoint


class TestFormatExample:
    def test_missing(self):
        assert format_example(None) == "{}"
        assert format_example("  ") == "{}"

    def test_non_json_kept(self):
        assert format_example("name=x") == "name=x"


class TestSerializePageData:
    def test_script_close_is_escaped(self):
        text = serialize_page_data({"description": "</script><b>"})
        assert "</script>" not in text
        assert json.loads(text) == {"description": "</script><b>"}

    def test_unserializable_data_gives_empty_object(self, caplog):
        with caplog.at_level("ERROR"):
            assert serialize_page_data({"bad": object()}) == "{}"
        assert "Failed to serialize page data" in caplog.text
