"""Post ORM — the single table this service reads and writes.

Invariants:
    - id is an auto-assigned integer primary key, never reused
    - likes >= 0 (CHECK constraint backs the handler-side floor)
    - removed defaults to false; rows are soft-deleted, never physically deleted
    - created is set once at insert time

Design Decisions:
    - Declared without a schema: the "social" schema is applied per request through
      schema_translate_map (infrastructure/database.py)
    - Handlers use the Core table (Post.__table__) with explicit column lists, so results
      expose column labels to the row mapper
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column

from social_posts.db.base import Base


class Post(Base):
    """A post with a like counter and a soft-delete flag."""
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    likes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0",
    )
    removed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )


posts_table = Post.__table__

# Public projection: removed is never exposed.
PUBLIC_COLUMNS = (
    posts_table.c.id,
    posts_table.c.content,
    posts_table.c.likes,
    posts_table.c.created,
)
