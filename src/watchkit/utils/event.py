import asyncio
import inspect

from watchkit.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


class Event:
    """A list of listeners called in registration order.

    Listener errors are logged and never propagate to the emitter, so a broken
    consumer cannot stop a clock tick. Coroutine results are scheduled on
    ``loop`` when one is set.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._listeners = []
        self.loop = loop

    def __len__(self):
        return len(self._listeners)

    def add_listener(self, listener):
        if not callable(listener):
            raise ValueError("Listener must be callable")
        self._listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, *args, **kwargs):
        for listener in list(self._listeners):
            try:
                result = listener(*args, **kwargs)

                # If listener returned a coroutine, schedule it
                if inspect.iscoroutine(result):
                    if not self.loop:
                        result.close()
                        raise RuntimeError("Async listener requires event loop")

                    self.loop.call_soon_threadsafe(
                        asyncio.ensure_future,
                        self._safe_task(result)
                    )

            except Exception:
                logger.exception("Error in event listener")

    async def _safe_task(self, coro):
        try:
            await coro
        except Exception:
            logger.exception("Unhandled exception in async event listener")
