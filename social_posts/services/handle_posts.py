"""Post Handlers — one coroutine per endpoint: validate, one or two statements, respond.

Invariants:
    - Invalid or missing parameters -> 400 before any statement runs
    - An id outside the int4 id column -> 404 before any statement runs
    - Rows with removed = true are invisible to every endpoint except restore
    - Mutations commit on their own, then the affected row is re-fetched and returned
    - likes never goes below 0; like/dislike are single atomic UPDATE statements
    - Infrastructure errors are not caught here: the dispatcher answers them with 500

Design Decisions:
    - Atomic SET likes = likes + 1 over read-modify-write: two concurrent likes
      on the same post both count
    - Plain async functions over handler classes: each handler needs only the
      RequestContext, no shared per-request state
"""

import logging
import re
from typing import Any

from sqlalchemy import case, insert, select, update
from starlette.datastructures import QueryParams

from social_posts.api.dispatcher import RequestContext
from social_posts.core.endpoint_registry import EndpointRegistry
from social_posts.core.errors import InvalidParameterError, PostNotFoundError
from social_posts.core.row_mapper import first_row, map_result
from social_posts.infrastructure.database import Schema
from social_posts.models.post import PUBLIC_COLUMNS, posts_table

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"^[+-]?\d+$")

# posts.id is an int4 column; nothing outside this range can match a row
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1


# ─── Parameter parsing ──────────────────────────────────────────

def parse_post_id(params: QueryParams) -> int:
    """Read the required integer `id` parameter."""
    raw = params.get("id")
    if raw is None:
        raise InvalidParameterError("id", "is required")
    raw = raw.strip()
    if not _INTEGER.match(raw):
        raise InvalidParameterError("id", "must be an integer")
    return int(raw)


def parse_content(params: QueryParams) -> str:
    """Read the required, non-blank `content` parameter."""
    content = params.get("content")
    if content is None:
        raise InvalidParameterError("content", "is required")
    if not content.strip():
        raise InvalidParameterError("content", "must not be blank")
    return content


# ─── Queries ────────────────────────────────────────────────────

async def _fetch_post(db: Schema, post_id: int) -> dict[str, Any] | None:
    result = await db.execute(
        select(*PUBLIC_COLUMNS).where(posts_table.c.id == post_id),
    )
    return first_row(result)


async def _update_and_fetch(
    ctx: RequestContext, post_id: int, statement,
) -> None:
    """Run an UPDATE, commit, then answer with the re-fetched row or 404."""
    result = await ctx.db.execute(statement)
    if result.rowcount == 0:
        ctx.response.send_error(PostNotFoundError(post_id))
        return
    await ctx.db.commit()
    post = await _fetch_post(ctx.db, post_id)
    if post is None:
        ctx.response.send_error(PostNotFoundError(post_id))
        return
    ctx.response.send_json(post)


def _reject(ctx: RequestContext, error: InvalidParameterError) -> None:
    logger.info(error.message, extra={"path": ctx.pathname, "error_code": error.code})
    ctx.response.send_error(error)


def _storable_id(ctx: RequestContext, post_id: int) -> bool:
    """Answer 404 up front for ids the id column cannot hold."""
    if ID_MIN <= post_id <= ID_MAX:
        return True
    ctx.response.send_error(PostNotFoundError(post_id))
    return False


def _read_id(ctx: RequestContext) -> int | None:
    try:
        post_id = parse_post_id(ctx.search_params)
    except InvalidParameterError as e:
        _reject(ctx, e)
        return None
    if not _storable_id(ctx, post_id):
        return None
    return post_id


# ─── Handlers ───────────────────────────────────────────────────

async def list_posts(ctx: RequestContext) -> None:
    """All visible posts, newest id first."""
    result = await ctx.db.execute(
        select(*PUBLIC_COLUMNS)
        .where(posts_table.c.removed.is_(False))
        .order_by(posts_table.c.id.desc()),
    )
    ctx.response.send_json(map_result(result))


async def get_post_by_id(ctx: RequestContext) -> None:
    post_id = _read_id(ctx)
    if post_id is None:
        return
    result = await ctx.db.execute(
        select(*PUBLIC_COLUMNS).where(
            posts_table.c.id == post_id,
            posts_table.c.removed.is_(False),
        ),
    )
    post = first_row(result)
    if post is None:
        ctx.response.send_error(PostNotFoundError(post_id))
        return
    ctx.response.send_json(post)


async def create_post(ctx: RequestContext) -> None:
    try:
        content = parse_content(ctx.search_params)
    except InvalidParameterError as e:
        _reject(ctx, e)
        return

    result = await ctx.db.execute(insert(posts_table).values(content=content))
    post_id = result.inserted_primary_key[0]
    await ctx.db.commit()
    logger.info("Post created", extra={"post_id": post_id})

    ctx.response.send_json(await _fetch_post(ctx.db, post_id))


async def edit_post(ctx: RequestContext) -> None:
    try:
        post_id = parse_post_id(ctx.search_params)
        content = parse_content(ctx.search_params)
    except InvalidParameterError as e:
        _reject(ctx, e)
        return
    if not _storable_id(ctx, post_id):
        return

    await _update_and_fetch(
        ctx, post_id,
        update(posts_table)
        .where(posts_table.c.id == post_id, posts_table.c.removed.is_(False))
        .values(content=content),
    )


async def delete_post(ctx: RequestContext) -> None:
    """Soft delete: the row stays, flagged removed."""
    post_id = _read_id(ctx)
    if post_id is None:
        return
    await _update_and_fetch(
        ctx, post_id,
        update(posts_table)
        .where(posts_table.c.id == post_id, posts_table.c.removed.is_(False))
        .values(removed=True),
    )


async def restore_post(ctx: RequestContext) -> None:
    post_id = _read_id(ctx)
    if post_id is None:
        return
    await _update_and_fetch(
        ctx, post_id,
        update(posts_table)
        .where(posts_table.c.id == post_id, posts_table.c.removed.is_(True))
        .values(removed=False),
    )


async def like_post(ctx: RequestContext) -> None:
    post_id = _read_id(ctx)
    if post_id is None:
        return
    await _update_and_fetch(
        ctx, post_id,
        update(posts_table)
        .where(posts_table.c.id == post_id, posts_table.c.removed.is_(False))
        .values(likes=posts_table.c.likes + 1),
    )


async def dislike_post(ctx: RequestContext) -> None:
    """Decrement likes, floored at 0."""
    post_id = _read_id(ctx)
    if post_id is None:
        return
    await _update_and_fetch(
        ctx, post_id,
        update(posts_table)
        .where(posts_table.c.id == post_id, posts_table.c.removed.is_(False))
        .values(likes=case(
            (posts_table.c.likes > 0, posts_table.c.likes - 1),
            else_=0,
        )),
    )


def build_post_registry() -> EndpointRegistry:
    """Registry of the eight post endpoints."""
    # every mapping explicit — adding an endpoint requires editing this dict
    return EndpointRegistry({
        "/posts.get": list_posts,
        "/posts.getById": get_post_by_id,
        "/posts.post": create_post,
        "/posts.edit": edit_post,
        "/posts.delete": delete_post,
        "/posts.restore": restore_post,
        "/posts.like": like_post,
        "/posts.dislike": dislike_post,
    })
