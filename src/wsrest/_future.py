import asyncio
from logging import getLogger
from typing import Any, Callable, Generic, Optional, TypeVar

from ._utils.constants import LOGGER_NAME

T = TypeVar("T")
U = TypeVar("U")

ProgressCallback = Callable[[float], Any]

logger = getLogger(LOGGER_NAME)


class WSFuture(asyncio.Future, Generic[T]):
    """An asyncio future that also reports progress.

    Progress callbacks run synchronously, in the context that calls
    ``set_progress``. Done callbacks keep the usual asyncio behaviour and are
    scheduled on the future's loop.
    """

    def __init__(self, *, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        super().__init__(loop=loop)
        self._progress_callbacks: list[ProgressCallback] = []

    def add_progress_callback(self, fn: ProgressCallback) -> None:
        self._progress_callbacks.append(fn)

    def set_progress(self, value: float) -> None:
        if self.done():
            return
        for callback in list(self._progress_callbacks):
            callback(value)

    def then(self, fn: Callable[[T], U]) -> "WSFuture[U]":
        """Return a future resolved with ``fn`` applied to this one's result.

        Failures and cancellation pass through untouched and progress is
        forwarded. An exception raised by ``fn`` rejects the returned future.
        Cancelling the returned future cancels this one.
        """
        target: WSFuture[U] = WSFuture(loop=self.get_loop())
        self.add_progress_callback(target.set_progress)

        def _cancel_source(done: "asyncio.Future[U]") -> None:
            if done.cancelled() and not self.done():
                self.cancel()

        target.add_done_callback(_cancel_source)

        def _on_done(source: "asyncio.Future[T]") -> None:
            if target.done():
                return
            if source.cancelled():
                target.cancel()
                return
            error = source.exception()
            if error is not None:
                target.set_exception(error)
                return
            try:
                value = fn(source.result())
            except Exception as e:
                target.set_exception(e)
            else:
                target.set_result(value)

        self.add_done_callback(_on_done)
        return target

    def resolve_on_main_thread(
        self, loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> "WSFuture[T]":
        return resolve_on_main_thread(self, loop)


def _copy_state(source: "asyncio.Future[T]", target: "asyncio.Future[T]") -> None:
    if target.done():
        return
    if source.cancelled():
        target.cancel()
        return
    error = source.exception()
    if error is not None:
        target.set_exception(error)
    else:
        target.set_result(source.result())


def resolve_on_main_thread(
    source: "asyncio.Future[T]", loop: Optional[asyncio.AbstractEventLoop] = None
) -> WSFuture[T]:
    """Mirror ``source`` onto the main event loop.

    Every progress, result, error or cancellation event of ``source`` is
    handed to ``loop`` with ``call_soon_threadsafe`` before it reaches the
    returned future, so subscribers always run on the main loop. Events keep
    the order in which ``source`` emitted them.

    Args:
        source: the future to mirror. It may belong to another loop running
            in another thread.
        loop: the main loop. Defaults to the running loop.

    Returns:
        WSFuture: a future owned by ``loop``.
    """
    main_loop = loop or asyncio.get_running_loop()
    target: WSFuture[T] = WSFuture(loop=main_loop)
    source_loop = source.get_loop()

    def _relay_progress(value: float) -> None:
        main_loop.call_soon_threadsafe(target.set_progress, value)

    def _relay_done(done: "asyncio.Future[T]") -> None:
        main_loop.call_soon_threadsafe(_copy_state, done, target)

    def _subscribe() -> None:
        if isinstance(source, WSFuture):
            source.add_progress_callback(_relay_progress)
        source.add_done_callback(_relay_done)

    def _cancel_source(done: "asyncio.Future[T]") -> None:
        if done.cancelled() and not source.done():
            source_loop.call_soon_threadsafe(source.cancel)

    target.add_done_callback(_cancel_source)

    try:
        on_source_loop = asyncio.get_running_loop() is source_loop
    except RuntimeError:
        on_source_loop = False

    # asyncio futures are not thread-safe, subscribe from the owning loop
    if source_loop is main_loop or on_source_loop:
        _subscribe()
    else:
        logger.debug("Relaying future from loop %r to main loop %r", source_loop, main_loop)
        source_loop.call_soon_threadsafe(_subscribe)

    return target
