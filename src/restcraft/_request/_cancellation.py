import asyncio
import inspect
from typing import Awaitable, Optional, TypeVar

from ..models.exceptions import RequestCancelledError

T = TypeVar("T")


class CancellationToken:
    """Cooperative cancellation signal attached to a single request.

    A token starts out not cancelled. Calling ``cancel()`` (or letting
    ``cancel_after()`` fire) wakes up every ``run()`` that is racing against
    it; the raced work is cancelled and ``RequestCancelledError`` is raised in
    its place.

    Examples:
        ```python
        token = CancellationToken()
        token.cancel_after(5.0)
        await api.search("query", token)
        ```
    """

    def __init__(self, *, can_be_cancelled: bool = True) -> None:
        self._can_be_cancelled = can_be_cancelled
        self._cancelled = False
        self._event: Optional[asyncio.Event] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @classmethod
    def none(cls) -> "CancellationToken":
        """Returns a token that is never cancelled."""
        return cls(can_be_cancelled=False)

    @property
    def can_be_cancelled(self) -> bool:
        return self._can_be_cancelled

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if not self._can_be_cancelled:
            raise RuntimeError("This token can never be cancelled")
        if self._cancelled:
            return
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._event is not None:
            self._event.set()

    def cancel_after(self, delay: float) -> None:
        """Schedules cancellation after ``delay`` seconds on the running loop."""
        if not self._can_be_cancelled:
            raise RuntimeError("This token can never be cancelled")
        if self._cancelled:
            return
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(delay, self.cancel)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RequestCancelledError()

    async def wait(self) -> None:
        """Waits until the token is cancelled."""
        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Awaits ``awaitable`` unless the token is cancelled first.

        Raises:
            RequestCancelledError: If the token is cancelled before or while
                the awaitable runs.
        """
        if not self._can_be_cancelled:
            return await awaitable

        if self._cancelled:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelledError()

        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except BaseException:
            work.cancel()
            waiter.cancel()
            raise

        if work in done:
            waiter.cancel()
            return work.result()

        work.cancel()
        try:
            await work
        except asyncio.CancelledError:
            pass
        except Exception as e:
            raise RequestCancelledError() from e
        raise RequestCancelledError()

    def __repr__(self) -> str:
        return (
            f"CancellationToken(can_be_cancelled={self._can_be_cancelled}, "
            f"is_cancelled={self._cancelled})"
        )
