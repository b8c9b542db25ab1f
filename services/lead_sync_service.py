"""
Live lead collection sync.

`LeadFeed` turns the remote store's change notifications into a stream of
full-list snapshots:
- entering the feed (`async with`) subscribes; leaving it always unsubscribes
- the first snapshot is the initial load; every later one follows a change
  notification (create/update/delete by any client)
- each snapshot is the complete list re-read from the store, newest first,
  as an immutable tuple; bursts of notifications are coalesced into one read
- an error from the subscription or from a read is logged, reported through
  the notifier, and ends the stream with `failed` set; `latest` keeps the
  last good snapshot.
  There is no retry: open a new feed to re-subscribe.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, Iterable, Optional, Protocol, Tuple, Union

from supabase import AsyncClient

from domain.lead import Lead
from repositories import lead_repository
from repositories.client import LEADS_TABLE, get_async_supabase
from services.notifications import LEADS_LOAD_FAILED, LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

LeadSnapshot = Tuple[Lead, ...]

# Realtime channel states that end a subscription. CLOSED also counts while
# the channel has not been removed by stop().
_FAILED_STATES = frozenset({"CHANNEL_ERROR", "TIMED_OUT"})


class LiveSyncError(RuntimeError):
    """Raised (or reported) when the live subscription fails."""


class ChangeSource(Protocol):
    """Something that calls `on_change` whenever the lead collection changes."""

    async def start(
        self,
        on_change: Callable[[], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        client = self._client or await get_async_supabase()
        channel = client.channel(f"{self._table}-changes")
        # stop() removes the channel even when subscribe fails.
        self._client = client
        self._channel = channel

        def _on_postgres_change(payload: Any) -> None:
            logger.debug("Realtime change on %s", self._table)
            on_change()

        def _on_status(status: Any, err: Optional[Exception] = None) -> None:
            state = str(getattr(status, "value", status))
            if state == "SUBSCRIBED":
                logger.info("Subscribed to realtime changes on %s", self._table)
            elif state in _FAILED_STATES or (state == "CLOSED" and self._channel is channel):
                on_error(err or LiveSyncError(f"Realtime channel for {self._table}: {state}"))

        channel.on_postgres_changes(
            "*", schema=self._schema, table=self._table, callback=_on_postgres_change
        )
        await channel.subscribe(_on_status)

    async def stop(self) -> None:
        if self._channel is None or self._client is None:
            return
        channel, self._channel = self._channel, None
        await self._client.remove_channel(channel)
        logger.info("Unsubscribed from realtime changes on %s", self._table)


class _Refresh:
    pass


_REFRESH = _Refresh()

_Signal = Union[_Refresh, BaseException]


class LeadFeed:
    """
    Async iterator of full-list snapshots, scoped by `async with`.

    Example:
        async with LeadFeed() as feed:
            async for leads in feed:
                render(leads)
    """

    def __init__(
        self,
        fetch: Optional[Callable[[], Iterable[Lead]]] = None,
        change_source: Optional[ChangeSource] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._fetch = fetch or lead_repository.list_leads
        self._source = change_source or SupabaseRealtimeChangeSource()
        self._notifier = notifier or LoggingNotifier()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional["asyncio.Queue[_Signal]"] = None
        self._finished = False
        self.latest: LeadSnapshot = ()
        self.failed = False

    async def __aenter__(self) -> "LeadFeed":
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._finished = False
        self.failed = False

        try:
            await self._source.start(self._on_change, self._on_error)
        except Exception as exc:
            self._on_error(exc)
        else:
            self._queue.put_nowait(_REFRESH)
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self._finished = True
        try:
            await self._source.stop()
        except Exception:
            logger.exception("Error tearing down lead subscription")

    def __aiter__(self) -> "LeadFeed":
        return self

    async def __anext__(self) -> LeadSnapshot:
        if self._queue is None:
            raise RuntimeError("LeadFeed must be entered with 'async with' before iterating")
        if self._finished:
            raise StopAsyncIteration

        signal = await self._queue.get()
        # Coalesce pending notifications; an error among them wins.
        while not isinstance(signal, BaseException) and not self._queue.empty():
            signal = self._queue.get_nowait()

        if isinstance(signal, BaseException):
            raise self._fail(signal)

        try:
            leads = await asyncio.to_thread(self._fetch)
        except Exception as exc:
            raise self._fail(exc) from exc

        self.latest = tuple(leads)
        return self.latest

    def _on_change(self) -> None:
        self._signal(_REFRESH)

    def _on_error(self, error: BaseException) -> None:
        self._signal(error)

    def _signal(self, signal: _Signal) -> None:
        if self._loop is None or self._queue is None or self._finished:
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, signal)

    def _fail(self, error: BaseException) -> StopAsyncIteration:
        logger.error("Error fetching leads: %s", error, exc_info=error)
        self._notifier.error(LEADS_LOAD_FAILED)
        self._finished = True
        self.failed = True
        return StopAsyncIteration()


async def subscribe_leads(
    fetch: Optional[Callable[[], Iterable[Lead]]] = None,
    change_source: Optional[ChangeSource] = None,
    notifier: Optional[Notifier] = None,
) -> AsyncIterator[LeadSnapshot]:
    """Yield full-list snapshots until the subscription fails or the consumer stops."""

    async with LeadFeed(fetch=fetch, change_source=change_source, notifier=notifier) as feed:
        async for snapshot in feed:
            yield snapshot


__all__ = [
    "ChangeSource",
    "LeadFeed",
    "LeadSnapshot",
    "LiveSyncError",
    "SupabaseRealtimeChangeSource",
    "subscribe_leads",
]
