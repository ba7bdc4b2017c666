"""Controller discovery.

Imports the application's packages and walks them with ``pkgutil`` looking
for classes carrying a controller marker.
"""

import importlib
import inspect
import logging
import pkgutil
import sys
from collections.abc import Iterable

from apidocx.scanner.builder import is_controller, qualified_name

logger = logging.getLogger(__name__)

FALLBACK_PACKAGES = ("app", "src")


def find_controllers(
    base_packages: Iterable[str] | None = None,
    exclude_packages: Iterable[str] = (),
    entry_module: str | None = None,
) -> list[type]:
    """Find every controller class under the base packages.

    The result is deduplicated and ordered by qualified class name.
    """
    packages = determine_base_packages(base_packages, entry_module)
    excludes = tuple(exclude_packages)
    logger.info("Scanning packages %s for controllers", ", ".join(packages))

    found: dict[str, type] = {}
    for package in packages:
        for cls in _scan_package(package):
            if should_include(cls.__module__, excludes):
                found.setdefault(qualified_name(cls), cls)

    controllers = [found[name] for name in sorted(found)]
    logger.info("Found %d controllers", len(controllers))
    return controllers


def determine_base_packages(base_packages: Iterable[str] | None = None, entry_module: str | None = None) -> list[str]:
    explicit = [p for p in (base_packages or ()) if p]
    if explicit:
        return explicit

    entry = entry_module or _main_module_name()
    if entry:
        top_level = entry.split(".")[0]
        if top_level not in ("__main__", "apidocx"):
            return [top_level]

    return list(FALLBACK_PACKAGES)


def _main_module_name() -> str | None:
    main = sys.modules.get("__main__")
    spec = getattr(main, "__spec__", None)
    return getattr(spec, "name", None)


def should_include(module_name: str, exclude_packages: Iterable[str] = ()) -> bool:
    if ".test." in module_name or module_name.endswith(".test"):
        return False
    return not any(module_name.startswith(prefix) for prefix in exclude_packages)


def _scan_package(package: str) -> list[type]:
    try:
        root = importlib.import_module(package)
    except Exception:
        logger.warning("Failed to scan package %s", package, exc_info=True)
        return []

    modules = [root]
    search_path = getattr(root, "__path__", None)
    if search_path is not None:
        walker = pkgutil.walk_packages(search_path, prefix=f"{root.__name__}.", onerror=_log_walk_error)
        for info in walker:
            try:
                modules.append(importlib.import_module(info.name))
            except Exception:
                logger.warning("Skipping module %s, import failed", info.name, exc_info=True)

    classes = []
    for module in modules:
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if obj.__module__ == module.__name__ and is_controller(obj):
                classes.append(obj)
    return classes


def _log_walk_error(name: str) -> None:
    logger.warning("Skipping package %s, import failed", name)
