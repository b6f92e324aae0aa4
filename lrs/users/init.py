"""Users module startup hook."""

from lrs.app_context import AppContext
from lrs.users.models import User


async def init(ctx: AppContext) -> None:
    await ctx.db.create_tables(User.__table__)
