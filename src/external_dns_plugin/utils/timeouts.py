"""Listener-level read and write deadlines as ASGI middleware."""

import asyncio
import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class RequestReadTimeout(Exception):
    """The client did not deliver the request body in time."""


def _consume(task: asyncio.Task) -> None:
    if not task.cancelled():
        task.exception()


class TimeoutMiddleware:
    """
    Enforce a read deadline on the request body and a write deadline on the
    whole exchange.

    A request whose body does not arrive within ``read_timeout`` is answered
    with 408. A request not answered within ``write_timeout`` is answered
    with 503 and its handler task is cancelled; a provider call already
    running on a worker thread is not interrupted and runs to completion in
    the background.
    """

    def __init__(self, app: ASGIApp, read_timeout: float, write_timeout: float):
        self.app = app
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False
        abandoned = False

        async def timed_receive() -> Message:
            try:
                return await asyncio.wait_for(receive(), self.read_timeout)
            except asyncio.TimeoutError:
                raise RequestReadTimeout() from None

        async def guarded_send(message: Message) -> None:
            nonlocal started
            if abandoned:
                return
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        task = asyncio.ensure_future(self.app(scope, timed_receive, guarded_send))
        done, _ = await asyncio.wait({task}, timeout=self.write_timeout)

        if task in done:
            try:
                task.result()
                return
            except RequestReadTimeout:
                logger.warning(
                    "%s %s: request body not received within %ss",
                    scope["method"],
                    scope["path"],
                    self.read_timeout,
                )
                status = 408
        else:
            logger.error(
                "%s %s: no response within %ss",
                scope["method"],
                scope["path"],
                self.write_timeout,
            )
            abandoned = True
            task.add_done_callback(_consume)
            task.cancel()
            status = 503

        if started:
            return

        await send({"type": "http.response.start", "status": status, "headers": []})
        await send({"type": "http.response.body", "body": b""})
