"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before any query runs
"""

from social_posts.models.post import Post  # noqa: F401
