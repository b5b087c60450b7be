"""Tool loader - discovers tool plugins and registers them in isolation.

Where candidates come from is a ``ToolSource``: ``DirectoryToolSource`` scans
a directory of plugin packages, ``StaticToolSource`` serves a compiled-in
list. The loader itself only activates candidates and registers them, so one
broken plugin never prevents the others from loading.
"""

import asyncio
import importlib.util
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol

from tool_host.core.base import Tool
from tool_host.core.registry import ToolRegistry
from tool_host.exceptions import ToolInterfaceError, ToolLoadError, ToolNotFoundError

logger = logging.getLogger(__name__)

ToolFactory = Callable[[], Tool]

PLUGIN_ENTRY = "__init__.py"
PLUGIN_EXPORT = "tool"
PLUGIN_NAMESPACE = "tool_host_plugins"


@dataclass(frozen=True)
class ToolCandidate:
    """A loadable tool that has not been activated yet.

    Attributes:
        name: Conventional tool name (the plugin directory name)
        origin: Where the candidate comes from, for diagnostics
        factory: Produces the tool descriptor; may raise
    """

    name: str
    origin: str
    factory: ToolFactory


@dataclass
class LoadReport:
    """Outcome of a bulk load."""

    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


class ToolSource(Protocol):
    """Where tool candidates are found."""

    def discover(self) -> list[ToolCandidate]: ...

    def locate(self, name: str) -> ToolCandidate: ...


class DirectoryToolSource:
    """Finds one plugin package per sub-directory: ``<dir>/<name>/__init__.py``.

    Each package must expose a module-level ``tool``. Packages are imported
    from their file under a private module name, so re-locating a candidate
    executes a fresh copy of the plugin.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def __repr__(self) -> str:
        return f"DirectoryToolSource({str(self.directory)!r})"

    def discover(self) -> list[ToolCandidate]:
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Tools directory not found: {self.directory}")

        return [
            self._candidate(entry.parent.name, entry)
            for entry in sorted(self.directory.glob(f"*/{PLUGIN_ENTRY}"))
            if not entry.parent.name.startswith(("_", "."))
        ]

    def locate(self, name: str) -> ToolCandidate:
        entry = self.directory / name / PLUGIN_ENTRY
        if not entry.is_file():
            raise ToolNotFoundError(name)
        return self._candidate(name, entry)

    def _candidate(self, name: str, entry: Path) -> ToolCandidate:
        return ToolCandidate(
            name=name,
            origin=str(entry),
            factory=lambda: _import_plugin(name, entry),
        )


class StaticToolSource:
    """Serves a fixed mapping of tool name -> factory."""

    def __init__(self, factories: dict[str, ToolFactory]) -> None:
        self._factories = dict(factories)

    def __repr__(self) -> str:
        return f"StaticToolSource({sorted(self._factories)!r})"

    def discover(self) -> list[ToolCandidate]:
        return [
            ToolCandidate(name=name, origin="static", factory=factory)
            for name, factory in self._factories.items()
        ]

    def locate(self, name: str) -> ToolCandidate:
        factory = self._factories.get(name)
        if factory is None:
            raise ToolNotFoundError(name)
        return ToolCandidate(name=name, origin="static", factory=factory)


class ToolLoader:
    """Activates tool candidates and registers them with a registry."""

    def __init__(self, registry: ToolRegistry, source: ToolSource) -> None:
        self.registry = registry
        self.source = source

    async def load_all(self) -> LoadReport:
        """Load every candidate concurrently. Never raises.

        Returns:
            LoadReport listing loaded tools and per-candidate failures
        """
        report = LoadReport()
        logger.info(f"Loading tools from: {self.source!r}")

        try:
            candidates = self.source.discover()
        except Exception:
            logger.exception("Failed to discover tools")
            return report

        logger.info(f"Found {len(candidates)} tool(s)")

        results = await asyncio.gather(
            *(self._load_candidate(c) for c in candidates),
            return_exceptions=True,
        )

        for candidate, result in zip(candidates, results):
            if isinstance(result, BaseException):
                report.failed[candidate.name] = str(result) or type(result).__name__
            else:
                report.succeeded.append(result)

        logger.info(
            f"Tool loading complete: {len(report.succeeded)} succeeded, "
            f"{len(report.failed)} failed"
        )
        return report

    async def reload_tool(self, name: str) -> None:
        """Unregister ``name`` and load it again from its source.

        Raises:
            ToolNotFoundError: If the source has no candidate for ``name``
            ToolLoadError: If the candidate cannot be loaded
            Exception: Whatever the tool's ``initialize`` or ``get_methods``
                raised
        """
        self.registry.unregister(name)
        await self._load_candidate(self.source.locate(name))

    async def _load_candidate(self, candidate: ToolCandidate) -> str:
        """Activate, validate and register a single candidate."""
        try:
            logger.debug(f"Loading tool: {candidate.name} from {candidate.origin}")
            tool = candidate.factory()
            _validate_tool(candidate.name, tool)
            await self.registry.register(tool)
        except Exception as e:
            logger.error(f"Failed to load tool: {candidate.name}: {e}")
            raise
        return tool.name


def _validate_tool(candidate_name: str, tool: object) -> None:
    name = getattr(tool, "name", None)
    if not isinstance(name, str) or not name:
        raise ToolInterfaceError(candidate_name)
    if not callable(getattr(tool, "get_methods", None)):
        raise ToolInterfaceError(candidate_name)


def _import_plugin(name: str, entry: Path) -> Tool:
    """Import a plugin package from ``entry`` and return its exported tool."""
    module_name = f"{PLUGIN_NAMESPACE}_{name}"
    spec = importlib.util.spec_from_file_location(
        module_name,
        entry,
        submodule_search_locations=[str(entry.parent)],
    )
    if spec is None or spec.loader is None:
        raise ToolLoadError(name, f"cannot import {entry}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise

    tool = getattr(module, PLUGIN_EXPORT, None)
    if tool is None:
        raise ToolLoadError(name, f"does not export '{PLUGIN_EXPORT}'")
    return tool
