"""Health and root endpoints."""

from fastapi import APIRouter, Request
from sqlalchemy import text

router = APIRouter()


@router.get("/")
async def root(request: Request) -> dict[str, str]:
    """Root endpoint."""
    return {"message": request.app.title, "version": request.app.version}


@router.get("/health")
async def health(request: Request) -> dict[str, str]:
    """Health check for the process supervisor.

    Returns:
        200 with the database status; the process is alive either way
    """
    try:
        async with request.app.state.lrs.db.session() as session:
            await session.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {type(e).__name__}"

    return {"status": "ok", "db": db_status}
