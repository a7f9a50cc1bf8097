"""Plugin discovery.

Plugins are plain Python modules. Builtin ones live in the
``hostfacts.plugins`` package; site-specific ones are ``*.py`` files in the
directories listed in ``plugin_path`` (searched recursively). Every
:class:`~hostfacts.framework.plugin.Plugin` subclass *defined* in such a
module and providing at least one attribute is picked up.
"""

import hashlib
import importlib
import importlib.util
import inspect
import pkgutil
import sys
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType

from hostfacts.core.errors import PluginLoadError
from hostfacts.framework.logging import get_logger
from hostfacts.framework.plugin import Plugin

log = get_logger(__name__)

BUILTIN_PACKAGE = "hostfacts.plugins"


def plugin_classes(module: ModuleType) -> list[type[Plugin]]:
    """Plugin subclasses defined in ``module`` (not imported into it)."""
    return [
        obj
        for _, obj in inspect.getmembers(module, inspect.isclass)
        if issubclass(obj, Plugin)
        and obj is not Plugin
        and obj.__module__ == module.__name__
        and obj.provides
    ]


class PluginLoader:
    """Finds plugin classes in packages and directories."""

    def load_package(self, package: str = BUILTIN_PACKAGE) -> list[type[Plugin]]:
        """Import every module of ``package`` and collect its plugin classes."""
        try:
            pkg = importlib.import_module(package)
        except ImportError as e:
            raise PluginLoadError(package, cause=e) from e

        classes: list[type[Plugin]] = []
        for info in sorted(pkgutil.iter_modules(pkg.__path__, prefix=f"{package}."), key=lambda i: i.name):
            try:
                module = importlib.import_module(info.name)
            except Exception as e:
                raise PluginLoadError(info.name, f"Error loading plugin module {info.name}: {e}", cause=e) from e
            classes.extend(plugin_classes(module))

        log.debug("loader.package_loaded", package=package, plugins=[c.name for c in classes])
        return classes

    def load_path(self, directory: str | Path) -> list[type[Plugin]]:
        """Import every ``*.py`` file under ``directory`` and collect its plugin classes."""
        root = Path(directory)
        if not root.is_dir():
            raise PluginLoadError(str(root), f"Plugin directory not found: {root}")

        classes: list[type[Plugin]] = []
        for path in sorted(root.rglob("*.py")):
            classes.extend(plugin_classes(self._load_file(path)))

        log.debug("loader.path_loaded", path=str(root), plugins=[c.name for c in classes])
        return classes

    def _load_file(self, path: Path) -> ModuleType:
        digest = hashlib.sha1(str(path.resolve()).encode()).hexdigest()[:12]
        module_name = f"_hostfacts_plugin_{path.stem}_{digest}"

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise PluginLoadError(str(path), f"Cannot load module from: {path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module

        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise PluginLoadError(str(path), f"Error loading {path}: {e}", cause=e) from e

        return module

    def load(
        self,
        paths: Iterable[str | Path] = (),
        include_builtin: bool = True,
    ) -> dict[str, type[Plugin]]:
        """
        Collect plugin classes by name: builtins first, then each path in order.

        A class whose name was already seen replaces the earlier one, so a
        plugin directory can override a builtin plugin.
        """
        sources: list[list[type[Plugin]]] = []
        if include_builtin:
            sources.append(self.load_package())
        for path in paths:
            sources.append(self.load_path(path))

        found: dict[str, type[Plugin]] = {}
        for classes in sources:
            for cls in classes:
                if cls.name in found and found[cls.name] is not cls:
                    log.debug("loader.plugin_overridden", plugin=cls.name, module=cls.__module__)
                found[cls.name] = cls
        return found


__all__ = ["PluginLoader", "plugin_classes", "BUILTIN_PACKAGE"]
