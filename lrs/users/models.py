"""User model."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from lrs.db.models import Base


class User(Base):
    """A learner or instructor, scoped to the tenant that launched them."""

    __tablename__ = "lrs_user"
    __table_args__ = (
        UniqueConstraint("tenant_domain", "external_id", name="uq_user_tenant_external_id"),
        Index("idx_user_tenant", "tenant_domain"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_domain: Mapped[str] = mapped_column(Text, nullable=False)
    external_id: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str | None] = mapped_column(Text)
    email: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
