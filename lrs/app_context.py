"""Application context handed to collaborators at construction time."""

from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from fastapi import APIRouter, FastAPI
from itsdangerous import Signer

from lrs.config import Settings
from lrs.db.engine import Database

if TYPE_CHECKING:
    from lrs.modules.loader import ModuleLoader


class UserResolver(Protocol):
    """Resolves a user id into a user, raising UserLookupError on failure."""

    def __call__(self, user_id: str) -> Awaitable[Any]: ...


@dataclass
class AppContext:
    """Handles established once at startup and read-only afterwards.

    ``app``, ``api_router`` and ``cookie_signer`` are populated by server setup.
    """

    settings: Settings
    db: Database
    modules: "ModuleLoader"
    user_resolver: UserResolver
    app: FastAPI | None = None
    api_router: APIRouter | None = None
    cookie_signer: Signer | None = None
    safe_path_prefixes: list[str] = field(default_factory=list)

    def add_safe_path_prefix(self, prefix: str) -> None:
        """Exempt paths under ``prefix`` from the CSRF referer check."""
        if prefix not in self.safe_path_prefixes:
            self.safe_path_prefixes.append(prefix)
