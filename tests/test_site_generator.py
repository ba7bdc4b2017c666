import json
import re

import pytest

from apidocx.config import UiSettings
from apidocx.generator.site import SiteGenerator, controller_page, endpoint_page
from apidocx.model.base import ApiDocumentation, ControllerDoc, EndpointDoc


def _page_data(html: str) -> dict:
    match = re.search(r"const docData = (.*);\n", html)
    return json.loads(match.group(1))


@pytest.fixture
def doc():
    users = ControllerDoc(
        name="UserController",
        class_name="shop.UserController",
        base_url="/api/users",
        endpoints=[
            EndpointDoc(name="listUsers", http_method="GET", url="/api/users"),
            EndpointDoc(name="createUser", http_method="POST", url="/api/users"),
        ],
    )
    orders = ControllerDoc(
        name="OrderController",
        class_name="shop.OrderController",
        endpoints=[EndpointDoc(name="cancel", http_method="DELETE", url="/api/orders/{id}")],
    )
    return ApiDocumentation(title="Shop <API>", version="1.2", controllers=[users, orders])


class TestPages:
    def test_index_contains_every_controller(self, doc):
        html = SiteGenerator().render_index(doc)
        data = _page_data(html)
        assert [c["name"] for c in data["controllers"]] == ["UserController", "OrderController"]
        assert html.startswith("<!DOCTYPE html>")

    def test_title_is_escaped(self, doc):
        html = SiteGenerator().render_index(doc)
        assert "<title>Shop &lt;API&gt;</title>" in html

    def test_controller_page_is_narrowed(self, doc):
        html = SiteGenerator().render_controller(doc.controllers[1], doc)
        data = _page_data(html)
        assert [c["name"] for c in data["controllers"]] == ["OrderController"]
        assert data["title"] == "Shop <API>"

    def test_endpoint_page_is_narrowed(self, doc):
        controller = doc.controllers[0]
        html = SiteGenerator().render_endpoint(controller.endpoints[1], controller, doc)
        [only] = _page_data(html)["controllers"]
        assert [e["name"] for e in only["endpoints"]] == ["createUser"]
        assert len(doc.controllers[0].endpoints) == 2

    def test_ui_settings_are_injected(self, doc):
        ui = UiSettings(
            theme="dark",
            branding_color="#FF0000",
            logo_text="S",
            environments={"local": "http://localhost:9000"},
        )
        html = SiteGenerator(ui).render_index(doc)
        assert 'data-theme="dark"' in html
        assert "--accent-primary: #FF0000;" in html
        assert '<div class="logo-icon">S</div>' in html
        assert 'const docEnvironments = {"local": "http://localhost:9000"};' in html

    def test_assets_are_inlined(self, doc):
        html = SiteGenerator().render_index(doc)
        assert "function getEndpointById" in html
        assert ".endpoint-card" in html


class TestGenerateAll:
    def test_file_names(self, doc):
        files = SiteGenerator().generate_all(doc)
        assert sorted(files) == [
            "controllers/ordercontroller.html",
            "controllers/usercontroller.html",
            "endpoints/delete-cancel.html",
            "endpoints/get-listusers.html",
            "endpoints/post-createuser.html",
            "index.html",
        ]

    def test_empty_documentation(self):
        files = SiteGenerator().generate_all(ApiDocumentation())
        assert list(files) == ["index.html"]
        assert _page_data(files["index.html"])["controllers"] == []

    def test_page_helpers(self, doc):
        assert controller_page(doc.controllers[0]) == "controllers/usercontroller.html"
        assert endpoint_page(doc.controllers[1].endpoints[0]) == "endpoints/delete-cancel.html"

    def test_colliding_endpoint_pages_are_reported(self, caplog):
        doc = ApiDocumentation(
            controllers=[
                ControllerDoc(name="Users", class_name="shop.Users", endpoints=[EndpointDoc(name="get", http_method="GET", url="/users/{id}")]),
                ControllerDoc(name="Orders", class_name="shop.Orders", endpoints=[EndpointDoc(name="get", http_method="GET", url="/orders/{id}")]),
            ]
        )
        with caplog.at_level("WARNING"):
            files = SiteGenerator().generate_all(doc)

        [only] = _page_data(files["endpoints/get-get.html"])["controllers"]
        assert only["name"] == "Orders"
        assert "endpoints/get-get.html" in caplog.text
        assert "Orders.get" in caplog.text

    def test_python_snippet_parses_body_as_json(self, doc):
        html = SiteGenerator().render_index(doc)
        assert "import json" in html
        assert "data = json.loads(r'''${body}''')" in html
