"""CLI entry point for apidocx."""

import logging
import sys
from pathlib import Path

import click

from apidocx.config import DocxSettings, load_settings
from apidocx.errors import DocxError
from apidocx.generator.writer import generate_site, load_documentation


def _build_overrides(**options) -> dict:
    """Turn CLI options into a nested settings override, skipping unset ones."""
    mapping = {
        "output_dir": ("output_dir",),
        "title": ("title",),
        "version": ("version",),
        "description": ("description",),
        "auto_scan": ("scan", "auto_scan"),
        "include_packages": ("scan", "base_packages"),
        "exclude_packages": ("scan", "exclude_packages"),
        "theme": ("ui", "theme"),
        "branding_color": ("ui", "branding_color"),
        "auto_generate_examples": ("features", "auto_generate_examples"),
        "manual_response_docs": ("features", "manual_response_docs"),
    }
    overrides: dict = {}
    for option, path in mapping.items():
        value = options.get(option)
        if value is None or value == ():
            continue
        target = overrides
        for key in path[:-1]:
            target = target.setdefault(key, {})
        target[path[-1]] = list(value) if isinstance(value, tuple) else value
    return overrides


def _load(config: Path | None, **options) -> DocxSettings:
    try:
        return load_settings(config, _build_overrides(**options))
    except DocxError as e:
        raise click.ClickException(str(e)) from e


def _add_app_dir(app_dir: Path | None) -> None:
    if app_dir is not None:
        sys.path.insert(0, str(app_dir.resolve()))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """apidocx: browsable API documentation from annotated controllers."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--config", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML settings file.")
@click.option("-o", "--output-dir", type=click.Path(file_okay=False, path_type=Path), help="Directory for the generated site.")
@click.option("--from-json", "from_json", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Render a saved documentation.json instead of scanning.")
@click.option("--app-dir", type=click.Path(exists=True, file_okay=False, path_type=Path), help="Directory added to the import path before scanning.")
@click.option("--auto-scan/--no-auto-scan", default=None, help="Scan packages for controllers.")
@click.option("--include-package", "include_packages", multiple=True, help="Package to scan (repeatable).")
@click.option("--exclude-package", "exclude_packages", multiple=True, help="Package prefix to skip (repeatable).")
@click.option("--title", default=None, help="Documentation title.")
@click.option("--version", default=None, help="API version shown in the docs.")
@click.option("--description", default=None, help="Documentation description.")
@click.option("--theme", default=None, type=click.Choice(["auto", "light", "dark"]), help="Page theme.")
@click.option("--branding-color", default=None, help="Accent colour, e.g. #3B82F6.")
@click.option("--auto-generate-examples/--no-auto-generate-examples", default=None, help="Synthesize request body examples.")
@click.option("--manual-response-docs/--no-manual-response-docs", default=None, help="Honour @apiResponse/@apiError lines.")
def generate(config: Path | None, app_dir: Path | None, from_json: Path | None, **options):
    """Generate the documentation site into the output directory."""
    _add_app_dir(app_dir)
    settings = _load(config, **options)

    try:
        if from_json is not None:
            click.echo(f"Loading {from_json}...")
            written = generate_site(settings, doc=load_documentation(from_json))
        else:
            packages = ", ".join(settings.scan.base_packages) or "auto-detected packages"
            click.echo(f"Scanning {packages}...")
            written = generate_site(settings)
    except DocxError as e:
        raise click.ClickException(str(e)) from e

    for path in written:
        click.echo(f"  Created {path}")
    click.echo(f"Generated {len(written)} files in {settings.output_dir}")


@main.command()
@click.option("--config", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML settings file.")
@click.option("--app-dir", type=click.Path(exists=True, file_okay=False, path_type=Path), help="Directory added to the import path before scanning.")
@click.option("--include-package", "include_packages", multiple=True, help="Package to scan (repeatable).")
@click.option("--exclude-package", "exclude_packages", multiple=True, help="Package prefix to skip (repeatable).")
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Bind port.")
def serve(config: Path | None, app_dir: Path | None, host: str, port: int, **options):
    """Serve the documentation over HTTP for previewing."""
    import uvicorn

    from apidocx.server.routes import create_app, normalize_prefix

    _add_app_dir(app_dir)
    settings = _load(config, **options)
    click.echo(f"Serving documentation at http://{host}:{port}{normalize_prefix(settings.base_path) or '/'}")
    uvicorn.run(create_app(settings), host=host, port=port)
