"""One documentation pass: discovery followed by model building."""

import logging
from collections.abc import Iterable

from apidocx.config import DocxSettings
from apidocx.model.base import ApiDocumentation
from apidocx.scanner.builder import ControllerDocBuilder
from apidocx.scanner.discovery import find_controllers

logger = logging.getLogger(__name__)


def collect_documentation(settings: DocxSettings, classes: Iterable[type] | None = None) -> ApiDocumentation:
    """Build the full documentation tree.

    ``classes`` skips discovery and documents exactly the given controllers.
    With ``scan.auto_scan`` off and no classes given, the tree has no
    controllers.
    """
    if classes is not None:
        controllers = list(classes)
    elif settings.scan.auto_scan:
        controllers = find_controllers(
            settings.scan.base_packages,
            settings.scan.exclude_packages,
            settings.scan.entry_module,
        )
    else:
        logger.info("Auto scan disabled, no controllers to document")
        controllers = []

    builder = ControllerDocBuilder(
        auto_generate_examples=settings.features.auto_generate_examples,
        manual_response_docs=settings.features.manual_response_docs,
    )
    controller_docs = [builder.build_controller(cls) for cls in controllers]
    models = builder.build_models(controllers) if settings.features.include_models else []

    logger.info(
        "Documented %d controllers, %d endpoints",
        len(controller_docs),
        sum(len(c.endpoints) for c in controller_docs),
    )
    return ApiDocumentation(
        title=settings.title,
        version=settings.version,
        description=settings.description,
        base_url=settings.base_url,
        controllers=controller_docs,
        models=models,
        configuration={
            "theme": settings.ui.theme,
            "brandingColor": settings.ui.branding_color,
            "logoText": settings.ui.logo_text,
        },
    )
