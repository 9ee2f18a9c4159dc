"""Filter plugins scoped to one viewer session.

A plugin is a Python file exposing ``apply_filter(image)`` that mutates the
given (writable) array in place. PluginHost owns the loaded modules; they are
not registered in ``sys.modules`` and are released by ``close()``.

Example plugin::

    def apply_filter(image):
        image[...] = 255 - image
"""

from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Dict, List, Union

import numpy as np

from .constants import PLUGIN_ENTRY_POINT
from .errors import PluginError

logger = logging.getLogger(__name__)


class PluginHost:
    """Loads filter modules and runs them against image copies."""

    def __init__(self, entry_point: str = PLUGIN_ENTRY_POINT):
        self.entry_point = entry_point
        self._modules: Dict[str, ModuleType] = {}

    def load(self, path: Union[str, Path]) -> str:
        """Import a plugin file and keep a handle to it.

        Returns:
            Plugin name (the file stem)

        Raises:
            PluginError: Import failed or the entry point is missing
        """
        path = Path(path)
        name = path.stem
        spec = importlib.util.spec_from_file_location(f"radialscope_plugin_{name}", path)
        if spec is None or spec.loader is None:
            raise PluginError(f"Cannot load plugin {path}")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise PluginError(f"Plugin {name} failed to import: {exc}") from exc
        if not callable(getattr(module, self.entry_point, None)):
            raise PluginError(f"Plugin {name} has no {self.entry_point}() entry point")
        self._modules[name] = module
        logger.info("loaded plugin %s from %s", name, path)
        return name

    def discover(self, directory: Union[str, Path]) -> List[str]:
        """Load every ``*.py`` in a directory not starting with ``_`` or ``.``.

        Broken plugins are logged and skipped.
        """
        directory = Path(directory)
        loaded = []
        if not directory.is_dir():
            return loaded
        for py_file in sorted(directory.glob("*.py")):
            if py_file.name.startswith(("_", ".")):
                continue
            try:
                loaded.append(self.load(py_file))
            except PluginError as exc:
                logger.warning("%s", exc)
        return loaded

    def names(self) -> List[str]:
        return sorted(self._modules)

    def apply(self, name: str, image: np.ndarray) -> np.ndarray:
        """Run a plugin on a writable copy of ``image``.

        Returns:
            The mutated copy (or the array the plugin returned, if any)

        Raises:
            PluginError: Unknown plugin, fault inside the plugin, or an
                unusable result
        """
        module = self._modules.get(name)
        if module is None:
            raise PluginError(f"Plugin {name} is not loaded")
        work = np.array(image, copy=True)
        try:
            result = getattr(module, self.entry_point)(work)
        except Exception as exc:
            logger.exception("plugin %s faulted", name)
            raise PluginError(f"Plugin {name} failed: {exc}") from exc
        if result is not None:
            work = np.asarray(result)
        if work.ndim not in (2, 3) or work.size == 0:
            raise PluginError(f"Plugin {name} produced an invalid image of shape {work.shape}")
        return work

    def unload(self, name: str) -> None:
        self._modules.pop(name, None)

    def close(self) -> None:
        """Release all module handles (session teardown)."""
        self._modules.clear()
