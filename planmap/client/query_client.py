"""Queries with freshness windows and mutations with optimistic updates."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from planmap.client.api import ApiError, PlanmapApi
from planmap.client.cache import CacheSnapshot, QueryCache, QueryKey
from planmap.client.retry import MUTATION_RETRY, QUERY_RETRY, RetryPolicy, run_with_retry

logger = logging.getLogger(__name__)

V = TypeVar("V")
R = TypeVar("R")


@dataclass
class OptimisticContext:
    """What a mutation needs to undo its speculative writes and refresh afterwards."""
    snapshots: List[CacheSnapshot] = field(default_factory=list)
    invalidate: List[QueryKey] = field(default_factory=list)
    # Id of the optimistic record a create mutation inserted, if any
    placeholder_id: Optional[str] = None


class MutationStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class QueryClient:
    """Owns the cache and the retry policies shared by all query families."""

    def __init__(
        self,
        api: PlanmapApi,
        cache: QueryCache | None = None,
        query_retry: RetryPolicy = QUERY_RETRY,
        mutation_retry: RetryPolicy = MUTATION_RETRY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.api = api
        self.cache = cache if cache is not None else QueryCache()
        self.query_retry = query_retry
        self.mutation_retry = mutation_retry
        self._sleep = sleep

    async def fetch_query(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[Any]],
        stale_time: float | None = None,
    ) -> Any:
        """Return cached data while fresh, otherwise fetch (with retries) and store it."""
        if not self.cache.is_stale(key, stale_time):
            return self.cache.get(key)
        generation = self.cache.generation(key)
        data = await run_with_retry(fetcher, self.query_retry, sleep=self._sleep)
        if not self.cache.set_if_current(key, data, generation):
            # An optimistic write or a newer fetch won; keep the cache as it is
            current = self.cache.get(key)
            return current if current is not None else data
        return data

    def invalidate(self, *prefixes: QueryKey) -> None:
        for prefix in prefixes:
            self.cache.invalidate(prefix)

    def run_mutation(self, fn: Callable[[], Awaitable[R]]) -> Awaitable[R]:
        return run_with_retry(fn, self.mutation_retry, sleep=self._sleep)


class Mutation(Generic[V, R]):
    """One mutation endpoint with its optimistic-update lifecycle.

    ``on_mutate`` runs before the request and returns an ``OptimisticContext``
    holding snapshots of every entry it touched. A failed request restores
    those snapshots verbatim and leaves the error on ``self.error``. On
    settlement, successful or not, the context's keys are invalidated so the
    next read re-syncs with the server.
    """

    def __init__(
        self,
        client: QueryClient,
        mutation_fn: Callable[[V], Awaitable[R]],
        on_mutate: Callable[[V], OptimisticContext] | None = None,
        on_success: Callable[[R, V, OptimisticContext], None] | None = None,
    ) -> None:
        self._client = client
        self._mutation_fn = mutation_fn
        self._on_mutate = on_mutate
        self._on_success = on_success
        self.status = MutationStatus.IDLE
        self.error: Optional[ApiError] = None
        self.data: Optional[R] = None

    @property
    def is_pending(self) -> bool:
        return self.status == MutationStatus.PENDING

    def reset(self) -> None:
        self.status = MutationStatus.IDLE
        self.error = None
        self.data = None

    async def mutate(self, variables: V) -> Optional[R]:
        """Run the mutation; on failure return None and keep the error on the object."""
        try:
            return await self.mutate_async(variables)
        except ApiError:
            return None

    async def mutate_async(self, variables: V) -> R:
        """Run the mutation and re-raise its error after rolling back."""
        self.status = MutationStatus.PENDING
        self.error = None
        context = self._on_mutate(variables) if self._on_mutate else OptimisticContext()
        try:
            data = await self._client.run_mutation(lambda: self._mutation_fn(variables))
        except ApiError as e:
            for snapshot in reversed(context.snapshots):
                self._client.cache.restore(snapshot)
            self.status = MutationStatus.ERROR
            self.error = e
            logger.warning(f"Mutation failed: {e!r}; rolling back {len(context.snapshots)} cache entries")
            raise
        else:
            self.data = data
            self.status = MutationStatus.SUCCESS
            if self._on_success:
                self._on_success(data, variables, context)
            return data
        finally:
            self._client.invalidate(*context.invalidate)
