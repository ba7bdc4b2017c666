"""End-to-end: scan the fixture application, build, render and serve."""

from typing import Annotated

from fastapi import FastAPI
from fastapi.testclient import TestClient

from apidocx.markers import PathVariable, Size, get_mapping, request_mapping, rest_controller
from apidocx.parser.comment import parse_comment
from apidocx.scanner.builder import ControllerDocBuilder
from apidocx.scanner.collect import collect_documentation
from apidocx.server.routes import install_docs


class TestScenarios:
    def test_minimal_controller(self):
        @rest_controller
        @request_mapping("/api/users")
        class UsersApi:
            @get_mapping("/")
            def list_all(self):
                pass

        doc = ControllerDocBuilder().build_controller(UsersApi)
        assert doc.base_url == "/api/users"
        [endpoint] = doc.endpoints
        assert (endpoint.http_method, endpoint.url) == ("GET", "/api/users")
        assert [r.status_code for r in endpoint.responses] == [200, 404, 500]

    def test_param_and_deprecation_tags(self):
        parsed = parse_comment("Load one.\n@param id the identifier\n@deprecated use v2")
        assert parsed.params == {"id": "the identifier"}
        assert parsed.is_deprecated
        assert parsed.deprecated == "use v2"

    def test_size_constraint_on_parameter(self):
        @rest_controller
        class Search:
            @get_mapping("/{term}")
            def find(self, term: Annotated[str, PathVariable(), Size(min=2, max=50)]):
                pass

        [endpoint] = ControllerDocBuilder().build_controller(Search).endpoints
        [constraint] = endpoint.path_variables[0].constraints
        assert constraint.description == "Size must be between 2 and 50"

    def test_exclude_prefix(self, settings):
        settings = settings.model_copy(
            update={"scan": settings.scan.model_copy(update={"exclude_packages": ["demo_app.internal"]})}
        )
        doc = collect_documentation(settings)
        assert [c.name for c in doc.controllers] == ["ProductController", "UserController"]


class TestCollectDocumentation:
    def test_scanned_tree(self, settings):
        doc = collect_documentation(settings)
        assert doc.title == "Demo API"
        assert doc.version == "2.0.0"
        assert [c.name for c in doc.controllers] == ["ProductController", "UserController", "AdminController"]
        assert doc.configuration == {"theme": "auto", "brandingColor": "#3B82F6", "logoText": "D"}
        assert doc.models == []

    def test_models_are_opt_in(self, settings):
        settings = settings.model_copy(
            update={"features": settings.features.model_copy(update={"include_models": True})}
        )
        doc = collect_documentation(settings)
        assert {m.name for m in doc.models} == {"User", "UserCreate", "ProductInput"}

    def test_auto_scan_disabled(self, settings):
        settings = settings.model_copy(update={"scan": settings.scan.model_copy(update={"auto_scan": False})})
        assert collect_documentation(settings).controllers == []

    def test_repeated_passes_are_identical(self, settings):
        assert collect_documentation(settings) == collect_documentation(settings)


class TestServedApplication:
    def test_host_app_with_docs(self, settings):
        app = FastAPI()

        @app.get("/health")
        def health():
            return {"ok": True}

        install_docs(app, settings)
        client = TestClient(app)

        assert client.get("/health").json() == {"ok": True}
        data = client.get("/docx/api/documentation.json").json()
        users = next(c for c in data["controllers"] if c["name"] == "UserController")
        create = next(e for e in users["endpoints"] if e["name"] == "create_user")
        assert create["requestBody"]["type"] == "UserCreate"
        assert create["deprecated"] is True
        assert client.get("/docx/endpoints/post-create_user.html").status_code == 200
