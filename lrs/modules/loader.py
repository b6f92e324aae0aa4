"""Pluggable module loader.

Modules are importable packages declared in settings, in registration order.
A module can ship two optional units next to its code:

- ``<module>.init``: exposes ``init(ctx)`` (sync or async), awaited at startup
- ``<module>.rest``: exposes ``register(ctx)``, adding endpoints to the API router
"""

import importlib
import importlib.util
import inspect
import logging
from collections.abc import Sequence
from types import ModuleType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lrs.app_context import AppContext

logger = logging.getLogger(__name__)

INIT_UNIT = "init"
REST_UNIT = "rest"


class ModuleLoader:
    """Registry of the known modules, fixed once constructed."""

    def __init__(self, module_names: Sequence[str]) -> None:
        self._module_names = tuple(module_names)

    @property
    def available_modules(self) -> list[str]:
        """Known module names, in declared order."""
        return list(self._module_names)

    def find_unit(self, module_name: str, unit: str) -> ModuleType | None:
        """Import ``<module_name>.<unit>`` if it exists.

        Probing is synchronous. A missing unit returns None; an error raised
        while importing a unit that exists propagates.
        """
        # Single-file modules cannot carry units
        if not hasattr(importlib.import_module(module_name), "__path__"):
            return None

        qualified = f"{module_name}.{unit}"
        if importlib.util.find_spec(qualified) is None:
            return None
        return importlib.import_module(qualified)

    async def init(self, ctx: "AppContext") -> None:
        """Import every module and run its optional init hook, in order.

        Raises:
            ImportError: If a declared module cannot be imported.
        """
        for module_name in self._module_names:
            importlib.import_module(module_name)

            init_unit = self.find_unit(module_name, INIT_UNIT)
            if init_unit is None:
                continue

            logger.debug("Initializing module %s", module_name, extra={"structured": {"module": module_name}})
            result = init_unit.init(ctx)
            if inspect.isawaitable(result):
                await result

        logger.info(
            "Finished initializing modules",
            extra={"structured": {"modules": list(self._module_names)}},
        )
