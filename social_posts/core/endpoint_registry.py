"""Endpoint Registry — explicit, read-only routing from URL path to handler.

Invariants:
    - Exactly one handler per path; lookup is exact string match
      (no patterns, no trailing-slash normalization)
    - Populated once at construction, never mutated afterward
    - A miss returns None; the caller answers 404

Design Decisions:
    - Explicit dict over decorators/auto-discovery: every mapping visible in one place
    - MappingProxyType: the registry has no register() and its view cannot be written
"""

from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping

# Handlers take the dispatcher's RequestContext
Handler = Callable[[Any], Awaitable[None]]


class EndpointRegistry:
    """Fixed path -> handler mapping."""

    def __init__(self, handlers: Mapping[str, Handler]):
        self._handlers = MappingProxyType(dict(handlers))

    def resolve(self, path: str) -> Handler | None:
        return self._handlers.get(path)

    def paths(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, path: object) -> bool:
        return path in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

