"""HTML site generator.

Every page is the same Jinja2 shell with the stylesheet and client script
inlined and a JSON snapshot of the documentation it covers. The client
script does the rendering in the browser.
"""

import json
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from apidocx.config import UiSettings
from apidocx.generator.template_data import serialize_page_data, to_template_data
from apidocx.model.base import ApiDocumentation, ControllerDoc, EndpointDoc

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


def controller_page(controller: ControllerDoc) -> str:
    return f"controllers/{controller.name.lower()}.html"


def endpoint_page(endpoint: EndpointDoc) -> str:
    return f"endpoints/{endpoint.http_method.lower()}-{endpoint.name.lower()}.html"


class SiteGenerator:
    def __init__(self, ui: UiSettings | None = None, templates_dir: Path = TEMPLATES_DIR):
        self.ui = ui or UiSettings()
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self.styles = (templates_dir / "styles.css").read_text(encoding="utf-8")
        self.script = (templates_dir / "app.js").read_text(encoding="utf-8")

    def render_index(self, doc: ApiDocumentation) -> str:
        return self._render_page(doc, doc.controllers, doc.title)

    def render_controller(self, controller: ControllerDoc, doc: ApiDocumentation) -> str:
        return self._render_page(doc, [controller], f"{controller.name} - {doc.title}")

    def render_endpoint(self, endpoint: EndpointDoc, controller: ControllerDoc, doc: ApiDocumentation) -> str:
        narrowed = controller.model_copy(update={"endpoints": [endpoint]})
        return self._render_page(doc, [narrowed], f"{endpoint.http_method} {endpoint.url} - {doc.title}")

    def generate_all(self, doc: ApiDocumentation) -> dict[str, str]:
        """Render the whole site as a mapping of relative path to HTML."""
        files = {"index.html": self.render_index(doc)}
        for controller in doc.controllers:
            files[controller_page(controller)] = self.render_controller(controller, doc)
            for endpoint in controller.endpoints:
                page = endpoint_page(endpoint)
                if page in files:
                    logger.warning(
                        "Endpoint page %s is written by several endpoints; %s.%s replaces the earlier one",
                        page,
                        controller.name,
                        endpoint.name,
                    )
                files[page] = self.render_endpoint(endpoint, controller, doc)
        logger.debug("Rendered %d pages", len(files))
        return files

    def _render_page(self, doc: ApiDocumentation, controllers: list[ControllerDoc], page_title: str) -> str:
        template = self.env.get_template("page.html")
        return template.render(
            page_title=page_title,
            doc=doc,
            theme=self.ui.theme,
            branding_color=self.ui.branding_color,
            logo_text=self.ui.logo_text,
            styles=self.styles,
            script=self.script,
            page_data=serialize_page_data(to_template_data(doc, controllers)),
            environments=json.dumps(self.ui.environments).replace("</", "<\\/"),
        )
