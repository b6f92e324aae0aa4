"""Per-request authorization context."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from starlette.requests import Request


class AuthState(str, Enum):
    """Authorization state of a single request."""

    unauthenticated = "unauthenticated"
    authenticated = "authenticated"


@dataclass(frozen=True)
class RequestContext:
    """Request context holding the resolved user.

    ``user`` is set iff ``state`` is ``AuthState.authenticated``.
    """

    state: AuthState
    user: Any = None

    def __post_init__(self) -> None:
        if (self.state is AuthState.authenticated) != (self.user is not None):
            raise ValueError("user must be set exactly when the context is authenticated")

    @classmethod
    def unauthenticated(cls) -> "RequestContext":
        return cls(state=AuthState.unauthenticated)

    @classmethod
    def authenticated(cls, user: Any) -> "RequestContext":
        return cls(state=AuthState.authenticated, user=user)

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.authenticated


def get_request_context(request: Request) -> RequestContext:
    """Return the context attached to the request, unauthenticated if none."""
    ctx = getattr(request.state, "ctx", None)
    if ctx is None:
        return RequestContext.unauthenticated()
    return ctx


def set_request_context(request: Request, ctx: RequestContext) -> None:
    request.state.ctx = ctx
