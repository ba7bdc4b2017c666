"""Settings for scanning, rendering and serving documentation.

Settings are pydantic models. They can be loaded from a YAML file and
overridden from the command line::

    title: Shop API
    scan:
      base_packages: [shop]
      exclude_packages: [shop.internal]
    features:
      export_openapi: true
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ValidationError

from apidocx.errors import ConfigError

DEFAULT_ENVIRONMENTS = {
    "local": "http://localhost:8000",
    "staging": "https://staging-api.example.com",
    "production": "https://api.example.com",
}


class ScanSettings(BaseModel):
    auto_scan: bool = True
    base_packages: list[str] = []
    exclude_packages: list[str] = []
    entry_module: str | None = None


class UiSettings(BaseModel):
    theme: Literal["auto", "light", "dark"] = "auto"
    branding_color: str = "#3B82F6"
    logo_text: str = "D"
    environments: dict[str, str] = DEFAULT_ENVIRONMENTS


class FeatureSettings(BaseModel):
    export_openapi: bool = False
    auto_generate_examples: bool = True
    manual_response_docs: bool = True
    include_models: bool = False


class DocxSettings(BaseModel):
    enabled: bool = True
    base_path: str = "/docx"
    title: str = "API Documentation"
    version: str = "1.0.0"
    description: str = "Generated API Documentation"
    base_url: str = ""
    output_dir: Path = Path("build/docx")
    scan: ScanSettings = ScanSettings()
    ui: UiSettings = UiSettings()
    features: FeatureSettings = FeatureSettings()


def load_settings(path: Path | None = None, overrides: dict[str, Any] | None = None) -> DocxSettings:
    """Load settings from a YAML file (optional) and apply nested overrides."""
    data: dict[str, Any] = {}
    if path is not None:
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read settings from {path}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        data = loaded or {}

    if overrides:
        data = _deep_merge(data, overrides)

    try:
        return DocxSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
