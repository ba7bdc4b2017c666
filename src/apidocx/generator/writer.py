"""Build-time writer: renders the site and saves it under an output directory."""

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from apidocx.config import DocxSettings
from apidocx.errors import GenerationError
from apidocx.generator.site import SiteGenerator
from apidocx.model.base import ApiDocumentation
from apidocx.scanner.collect import collect_documentation

logger = logging.getLogger(__name__)

ASSET_DIRS = ("assets/css", "assets/js", "assets/images")
DOCUMENTATION_JSON = "api/documentation.json"


def write_site(files: dict[str, str], output_dir: Path) -> list[Path]:
    """Write each relative path under ``output_dir``, creating parent directories."""
    written = []
    for relative, content in files.items():
        target = output_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        written.append(target)
    return written


def create_asset_dirs(output_dir: Path) -> None:
    """Create the empty asset scaffold. Failures here are not fatal."""
    for name in ASSET_DIRS:
        try:
            (output_dir / name).mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.warning("Could not create asset directory %s", output_dir / name, exc_info=True)


def load_documentation(path: Path) -> ApiDocumentation:
    """Read a documentation tree previously saved as ``documentation.json``."""
    try:
        return ApiDocumentation.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise GenerationError(f"Cannot load documentation from {path}: {e}") from e


def generate_site(
    settings: DocxSettings,
    classes: Iterable[type] | None = None,
    doc: ApiDocumentation | None = None,
) -> list[Path]:
    """Write the site to ``settings.output_dir``.

    Runs a documentation pass unless a ready ``doc`` is given. The tree
    itself is saved next to the pages as ``api/documentation.json`` so the
    site can be rendered again without importing the application. Any
    failure is raised as :class:`GenerationError`.
    """
    output_dir = Path(settings.output_dir)
    try:
        if doc is None:
            doc = collect_documentation(settings, classes)
        files = SiteGenerator(settings.ui).generate_all(doc)
        files[DOCUMENTATION_JSON] = doc.model_dump_json(by_alias=True, indent=2)
        output_dir.mkdir(parents=True, exist_ok=True)
        written = write_site(files, output_dir)
    except Exception as e:
        raise GenerationError(f"Failed to generate documentation: {e}") from e

    create_asset_dirs(output_dir)
    logger.info("Wrote %d files to %s", len(written), output_dir)
    return written
