"""Push-based record streams over log subscriptions.

A :class:`RecordStream` is a *cold* description of "subscribe to this topic and
hydrate every params item into a record".  Nothing happens until a consumer
subscribes; each subscription opens its own underlying log subscription.

Every :class:`StreamSubscription` is a small channel pipeline:

* a **sender task** opens the log subscription, hydrates each item and puts
  ``(kind, value)`` signals on a bounded ``asyncio.Queue``;
* the **receiver handle** (the subscription itself) is an async iterator over
  that queue and owns the cancellation switch (:meth:`unsubscribe`).

Three signal kinds travel through the queue: an item, an error (terminal) and
completion (terminal).  Errors are delivered as the exact exception object the
source raised.

Usage
-----

```python
stream = await identity.missions()

# pull
async for mission in stream:
    ...

# pull, with deterministic teardown
async with stream.subscribe() as sub:
    async for mission in sub:
        ...

# push
sub = stream.subscribe(on_next=handle, on_error=report)
...
sub.unsubscribe()
```
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import AsyncIterator
from typing import Awaitable
from typing import Callable
from typing import Generic
from typing import Optional
from typing import Tuple
from typing import TypeVar

from davsdk.constants import STREAM_QUEUE_SIZE

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")

SourceOpener = Callable[[], Awaitable[AsyncIterator[S]]]


class _Signal(str, Enum):
    ITEM = "item"
    ERROR = "error"
    COMPLETE = "complete"


class StreamSubscription(Generic[T]):
    """One live subscription: sender task plus receiver handle.

    Not restartable – once completed, failed or unsubscribed it stays closed.
    Must be created from inside a running event loop.
    """

    def __init__(
        self,
        opener: SourceOpener,
        transform: Callable[[object], T],
        *,
        name: str = "stream",
        queue_size: int = STREAM_QUEUE_SIZE,
    ):
        self.name = name
        self._queue: asyncio.Queue[Tuple[_Signal, object]] = asyncio.Queue(maxsize=queue_size)
        self._finished = False
        self._cancelled = False
        self._relay_task: Optional[asyncio.Task] = None
        self._sender_task = asyncio.create_task(self._sender(opener, transform))

    # ------------------------------------------------------------------
    # Sender side
    # ------------------------------------------------------------------

    async def _sender(self, opener: SourceOpener, transform: Callable[[object], T]) -> None:
        source = None
        try:
            source = await opener()
            async for item in source:
                await self._queue.put((_Signal.ITEM, transform(item)))
        except Exception as exc:
            logger.debug(f"Subscription {self.name} failed: {exc!r}")
            await self._queue.put((_Signal.ERROR, exc))
        else:
            logger.debug(f"Subscription {self.name} completed")
            await self._queue.put((_Signal.COMPLETE, None))
        finally:
            aclose = getattr(source, "aclose", None)
            if aclose is not None:
                await aclose()

    # ------------------------------------------------------------------
    # Receiver side
    # ------------------------------------------------------------------

    def __aiter__(self) -> StreamSubscription[T]:
        return self

    async def __anext__(self) -> T:
        if self._finished:
            raise StopAsyncIteration

        kind, value = await self._queue.get()
        if kind is _Signal.ITEM:
            return value  # type: ignore[return-value]

        self._finished = True
        if kind is _Signal.ERROR:
            raise value  # type: ignore[misc]
        raise StopAsyncIteration

    @property
    def closed(self) -> bool:
        return self._finished or self._cancelled

    def unsubscribe(self) -> None:
        """Tear down the log subscription. Idempotent.

        Items already hydrated but not yet consumed are discarded; a pending
        ``__anext__`` wakes up and ends the iteration.
        """
        if self._cancelled:
            return
        self._cancelled = True

        if not self._sender_task.done():
            self._sender_task.cancel()
        relay = self._relay_task
        if relay is not None and not relay.done() and relay is not asyncio.current_task():
            relay.cancel()

        # Drop undelivered signals and wake the receiver with completion
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait((_Signal.COMPLETE, None))
        logger.debug(f"Subscription {self.name} unsubscribed")

    async def aclose(self) -> None:
        """Unsubscribe and wait until the log subscription is released."""
        self.unsubscribe()
        await self.wait_closed()

    async def wait_closed(self) -> None:
        """Wait until the sender (and the callback relay, if any) have finished."""
        tasks = [self._sender_task]
        if self._relay_task is not None:
            tasks.append(self._relay_task)
        await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> StreamSubscription[T]:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Callback relay (used by RecordStream.subscribe)
    # ------------------------------------------------------------------

    def _start_relay(
        self,
        on_next: Optional[Callable[[T], None]],
        on_error: Optional[Callable[[Exception], None]],
        on_complete: Optional[Callable[[], None]],
    ) -> None:
        self._relay_task = asyncio.create_task(self._relay(on_next, on_error, on_complete))

    async def _relay(
        self,
        on_next: Optional[Callable[[T], None]],
        on_error: Optional[Callable[[Exception], None]],
        on_complete: Optional[Callable[[], None]],
    ) -> None:
        while True:
            try:
                item = await self.__anext__()
            except StopAsyncIteration:
                if on_complete is not None and not self._cancelled:
                    try:
                        on_complete()
                    except Exception as exc:
                        logger.error(f"on_complete handler for subscription {self.name} raised: {exc!r}")
                return
            except Exception as exc:
                self._report(on_error, exc)
                return

            if on_next is not None:
                try:
                    on_next(item)
                except Exception as exc:
                    # A failing consumer ends the subscription like a source error
                    self.unsubscribe()
                    self._report(on_error, exc)
                    return

    def _report(self, on_error: Optional[Callable[[Exception], None]], exc: Exception) -> None:
        if on_error is None:
            logger.error(f"Unhandled error on subscription {self.name}: {exc!r}")
            return
        try:
            on_error(exc)
        except Exception as handler_exc:
            logger.error(
                f"on_error handler for subscription {self.name} raised {handler_exc!r} while handling {exc!r}"
            )


class RecordStream(Generic[T]):
    """Cold stream of records hydrated from a log subscription."""

    def __init__(self, opener: SourceOpener, transform: Callable[[object], T], *, name: str = "stream"):
        self._opener = opener
        self._transform = transform
        self.name = name

    def subscribe(
        self,
        on_next: Optional[Callable[[T], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> StreamSubscription[T]:
        """Open a new subscription.

        With callbacks, delivery is pushed to them from a background task;
        without, iterate the returned subscription directly.  An error with no
        ``on_error`` handler is logged rather than dropped.
        """
        subscription: StreamSubscription[T] = StreamSubscription(self._opener, self._transform, name=self.name)
        if on_next is not None or on_error is not None or on_complete is not None:
            subscription._start_relay(on_next, on_error, on_complete)
        return subscription

    async def __aiter__(self) -> AsyncIterator[T]:
        # Leaving the loop early (break, exception) finalizes this generator,
        # which releases the log subscription
        subscription = self.subscribe()
        try:
            async for record in subscription:
                yield record
        finally:
            await subscription.aclose()
