"""HTTP surface serving the generated documentation.

Mounted under ``settings.base_path`` (``/docx`` by default)::

    GET /docx                                 index page
    GET /docx/controllers/{name}.html         one controller
    GET /docx/endpoints/{method}-{name}.html  one endpoint
    GET /docx/api/documentation.json          full documentation tree
    GET /docx/api/refresh                     rebuild the tree
    GET /docx/openapi.json                    OpenAPI stub (opt-in)
"""

import logging
from collections.abc import Iterable

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.responses import HTMLResponse, Response

from apidocx.config import DocxSettings
from apidocx.generator.openapi import to_openapi
from apidocx.generator.site import SiteGenerator
from apidocx.scanner.collect import collect_documentation
from apidocx.server.cache import DocumentationCache

logger = logging.getLogger(__name__)


def normalize_prefix(base_path: str) -> str:
    stripped = base_path.strip("/")
    return f"/{stripped}" if stripped else ""


def create_docs_router(
    settings: DocxSettings,
    cache: DocumentationCache,
    generator: SiteGenerator | None = None,
) -> APIRouter:
    prefix = normalize_prefix(settings.base_path)
    generator = generator or SiteGenerator(settings.ui)
    router = APIRouter(prefix=prefix)

    def index() -> HTMLResponse:
        return HTMLResponse(generator.render_index(cache.get_or_build()))

    if prefix:
        router.add_api_route("", index, methods=["GET"], response_class=HTMLResponse, include_in_schema=False)
    router.add_api_route("/", index, methods=["GET"], response_class=HTMLResponse, include_in_schema=False)
    router.add_api_route("/index.html", index, methods=["GET"], response_class=HTMLResponse, include_in_schema=False)

    @router.get("/controllers/{name}.html", response_class=HTMLResponse, include_in_schema=False)
    def controller_page(name: str) -> HTMLResponse:
        doc = cache.get_or_build()
        for controller in doc.controllers:
            if controller.name.lower() == name.lower():
                return HTMLResponse(generator.render_controller(controller, doc))
        raise HTTPException(status_code=404, detail=f"Controller not found: {name}")

    @router.get("/endpoints/{slug}.html", response_class=HTMLResponse, include_in_schema=False)
    def endpoint_page(slug: str) -> HTMLResponse:
        method, _, name = slug.partition("-")
        doc = cache.get_or_build()
        for controller in doc.controllers:
            for endpoint in controller.endpoints:
                if endpoint.http_method.lower() == method.lower() and endpoint.name.lower() == name.lower():
                    return HTMLResponse(generator.render_endpoint(endpoint, controller, doc))
        raise HTTPException(status_code=404, detail=f"Endpoint not found: {slug}")

    @router.get("/api/documentation.json", include_in_schema=False)
    def documentation_json() -> Response:
        doc = cache.get_or_build()
        return Response(doc.model_dump_json(by_alias=True), media_type="application/json")

    @router.get("/api/refresh", include_in_schema=False)
    def refresh() -> dict:
        built_at = cache.refresh()
        logger.info("Documentation refreshed")
        return {"status": "refreshed", "timestamp": str(round(built_at * 1000))}

    @router.get("/openapi.json", include_in_schema=False)
    def openapi() -> dict:
        if not settings.features.export_openapi:
            raise HTTPException(status_code=404, detail="OpenAPI export is disabled")
        return to_openapi(cache.get_or_build())

    return router


def install_docs(
    app: FastAPI,
    settings: DocxSettings | None = None,
    classes: Iterable[type] | None = None,
) -> DocumentationCache | None:
    """Mount the documentation routes on ``app`` unless disabled in settings."""
    settings = settings or DocxSettings()
    if not settings.enabled:
        logger.info("Documentation disabled, routes not installed")
        return None

    controllers = list(classes) if classes is not None else None
    cache = DocumentationCache(lambda: collect_documentation(settings, controllers))
    app.include_router(create_docs_router(settings, cache))
    logger.info("Documentation available at %s", normalize_prefix(settings.base_path) or "/")
    return cache


def create_app(settings: DocxSettings, classes: Iterable[type] | None = None) -> FastAPI:
    """Standalone app serving only the documentation, used by ``apidocx serve``."""
    app = FastAPI(title=settings.title, docs_url=None, redoc_url=None, openapi_url=None)
    install_docs(app, settings, classes)
    return app
