"""Unit tests for the module loader and REST route discovery."""

import importlib
from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi import APIRouter

from lrs.api.server import register_rest_apis
from lrs.modules.loader import ModuleLoader

SYNC_INIT = """
from {prefix}_events import EVENTS

def init(ctx):
    EVENTS.append(("init", __name__))
"""

ASYNC_INIT = """
from {prefix}_events import EVENTS

async def init(ctx):
    EVENTS.append(("init", __name__))
"""

REST = """
from {prefix}_events import EVENTS

def register(ctx):
    EVENTS.append(("rest", __name__))
    ctx.api_router.add_api_route("/" + __name__.split(".")[0], lambda: {"ok": True})
"""


def _events(prefix: str) -> list[tuple[str, str]]:
    return importlib.import_module(f"{prefix}_events").EVENTS


def test_available_modules_keep_declared_order() -> None:
    loader = ModuleLoader(["b", "a", "c"])

    assert loader.available_modules == ["b", "a", "c"]


@pytest.mark.asyncio
async def test_init_runs_sync_and_async_hooks_in_order(make_plugins: Callable) -> None:
    prefix = make_plugins(
        {
            "beta": {"init": ASYNC_INIT},
            "alpha": {"init": SYNC_INIT},
            "gamma": {},
        }
    )
    loader = ModuleLoader([f"{prefix}_beta", f"{prefix}_alpha", f"{prefix}_gamma"])

    await loader.init(SimpleNamespace())

    assert _events(prefix) == [
        ("init", f"{prefix}_beta.init"),
        ("init", f"{prefix}_alpha.init"),
    ]


@pytest.mark.asyncio
async def test_init_fails_for_unknown_module() -> None:
    loader = ModuleLoader(["lrs_module_that_does_not_exist"])

    with pytest.raises(ImportError):
        await loader.init(SimpleNamespace())


def test_find_unit_returns_none_when_missing(make_plugins: Callable) -> None:
    prefix = make_plugins({"alpha": {}})
    loader = ModuleLoader([f"{prefix}_alpha"])

    assert loader.find_unit(f"{prefix}_alpha", "rest") is None


def test_find_unit_propagates_broken_unit(make_plugins: Callable) -> None:
    prefix = make_plugins({"alpha": {"rest": "raise RuntimeError('broken rest unit')\n"}})
    loader = ModuleLoader([f"{prefix}_alpha"])

    with pytest.raises(RuntimeError, match="broken rest unit"):
        loader.find_unit(f"{prefix}_alpha", "rest")


def test_register_rest_apis_follows_module_order_and_skips_missing(make_plugins: Callable) -> None:
    prefix = make_plugins(
        {
            "gamma": {"rest": REST},
            "alpha": {},
            "beta": {"rest": REST},
        }
    )
    modules = [f"{prefix}_gamma", f"{prefix}_alpha", f"{prefix}_beta"]
    ctx = SimpleNamespace(modules=ModuleLoader(modules), api_router=APIRouter(prefix="/api/{tenant_domain}/{course_id}"))

    register_rest_apis(ctx)  # type: ignore[arg-type]

    assert _events(prefix) == [
        ("rest", f"{prefix}_gamma.rest"),
        ("rest", f"{prefix}_beta.rest"),
    ]
    paths = [route.path for route in ctx.api_router.routes]
    assert paths == [
        f"/api/{{tenant_domain}}/{{course_id}}/{prefix}_gamma",
        f"/api/{{tenant_domain}}/{{course_id}}/{prefix}_beta",
    ]


@pytest.mark.asyncio
async def test_single_file_module_has_no_units(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "lrs_single_file_plugin.py").write_text("LOADED = True\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    loader = ModuleLoader(["lrs_single_file_plugin"])
    ctx = SimpleNamespace(modules=loader, api_router=APIRouter())

    await loader.init(SimpleNamespace())
    register_rest_apis(ctx)  # type: ignore[arg-type]

    assert loader.find_unit("lrs_single_file_plugin", "rest") is None
    assert loader.find_unit("lrs_single_file_plugin", "init") is None
    assert ctx.api_router.routes == []
