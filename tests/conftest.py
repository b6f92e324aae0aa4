"""Shared pytest fixtures for all test suites."""

import textwrap
import uuid
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from itsdangerous import Signer

from lrs.app_context import AppContext
from lrs.config import Settings
from lrs.main import init
from lrs.utils.cookies import cookie_name, make_signer, sign_cookie_value

COOKIE_SECRET = "test-cookie-secret"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings backed by a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'lrs.db'}",
        cookie_secret=COOKIE_SECRET,
        lrs_modules=["lrs.users"],
        exit_on_uncaught_exception=False,
    )


@pytest.fixture
def signer(settings: Settings) -> Signer:
    return make_signer(settings.cookie_secret, settings.cookie_salt)


@pytest.fixture
def cookie_header(signer: Signer) -> Callable[[str, str, str], dict[str, str]]:
    """Build a Cookie header carrying the scoped, signed user id."""

    def _build(tenant_domain: str, course_id: str, user_id: str) -> dict[str, str]:
        name = cookie_name(tenant_domain, course_id)
        return {"Cookie": f"{name}={sign_cookie_value(signer, user_id)}"}

    return _build


@pytest_asyncio.fixture
async def lrs_ctx(settings: Settings) -> AsyncGenerator[AppContext, None]:
    """Fully initialized application context using the users table."""
    ctx = await init(settings)
    yield ctx
    await ctx.db.dispose()


@pytest_asyncio.fixture
async def client(lrs_ctx: AppContext) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=lrs_ctx.app), base_url="http://test") as c:
        yield c


@pytest.fixture
def make_plugins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[[dict[str, dict[str, str]]], str]:
    """Write throwaway plugin packages and put them on sys.path.

    Takes {module: {unit: source}} and returns a unique prefix; module names
    become "<prefix>_<module>". Sources can use "{prefix}" and import the
    shared "<prefix>_events.EVENTS" list to record what ran.
    """

    def _make(modules: dict[str, dict[str, str]]) -> str:
        prefix = f"plug{uuid.uuid4().hex[:8]}"
        root = tmp_path / "plugins"
        root.mkdir(exist_ok=True)
        (root / f"{prefix}_events.py").write_text("EVENTS = []\n")

        for module, units in modules.items():
            package = root / f"{prefix}_{module}"
            package.mkdir()
            (package / "__init__.py").write_text("")
            for unit, source in units.items():
                (package / f"{unit}.py").write_text(textwrap.dedent(source).replace("{prefix}", prefix))

        monkeypatch.syspath_prepend(str(root))
        return prefix

    return _make
