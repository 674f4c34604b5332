"""Cooperative cancellation handle for long-running fetches."""

import asyncio


class CancellationToken:
    """Signals an in-flight operation to stop.

    The operation holding the token races its work against ``wait()`` and
    aborts whichever network call is active when the token fires.

    Usage:
        token = CancellationToken()
        task = asyncio.create_task(proxy.fetch("abc", cancel_token=token))
        token.cancel("user navigated away")
    """

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()
