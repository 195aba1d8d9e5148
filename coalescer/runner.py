"""
Call coalescing for functions that are triggered far more often than they should run.

.. rubric:: Example

.. code-block::

    @coalesce
    async def refresh(path):
        ...

    # Triggered by a file watcher. While a refresh is in flight, any number of
    # further triggers result in a single follow-up refresh.
    refresh('./data')

"""

import asyncio
import concurrent.futures
import functools
import inspect
import logging
import sys
from typing import Any, Callable, Dict, Optional, Tuple, Union

from coalescer.logging import logged_exception

LOGGER = logging.getLogger(__name__)

Arguments = Tuple[Tuple[Any, ...], Dict[str, Any]]

Settlement = Union[asyncio.Future, concurrent.futures.Future]


def consume_exception(future: Settlement):
    """
    Retrieves the exception of a done future and discards it, so that asyncio does not report it
    when the future is garbage collected.
    """
    if not future.cancelled():
        future.exception()


def is_deferred(value) -> bool:
    """
    Whether a task's return value settles asynchronously. Any awaitable qualifies
    (coroutines, :class:`asyncio.Future` objects and any object implementing ``__await__``),
    as do :class:`concurrent.futures.Future` objects.
    """
    return inspect.isawaitable(value) or isinstance(value, concurrent.futures.Future)


def as_future(value) -> Optional[Settlement]:
    """
    Returns the future to wait on for a task's return value, or ``None`` if the value is immediate.

    Awaitables are scheduled on the running event loop. On Python 3.12+, coroutines start eagerly,
    i.e., they run up to their first suspension before this function returns.

    Concurrent futures are bridged onto the running loop, so that their completion is observed from
    the loop's thread. With no running loop, they are returned as is and their completion is
    observed from the thread that completes them.

    :raises RuntimeError: If the value is an awaitable but no event loop is running. Coroutines
      are closed before raising.
    """
    if not is_deferred(value):
        return None

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        if isinstance(value, concurrent.futures.Future):
            return value
        if inspect.iscoroutine(value):
            value.close()
        raise

    if isinstance(value, concurrent.futures.Future):
        return asyncio.wrap_future(value, loop=loop)
    if inspect.iscoroutine(value) and sys.version_info >= (3, 12):
        return asyncio.Task(value, loop=loop, eager_start=True)
    return asyncio.ensure_future(value, loop=loop)


class Coalescer:
    """
    Wraps a task so that at most one execution of it is in flight at any time.

    Calling the coalescer while the task is idle runs the task right away. Calls that arrive while
    an execution is in flight do not run the task. Instead, they are collapsed into a single
    follow-up execution that starts once the in-flight execution completes. The follow-up uses
    the arguments of the most recent call.

    The task can be a plain function or return an awaitable (e.g., an ``async def`` function).
    Awaitables are scheduled on the running event loop and the coalescer returns without waiting
    for them. Before Python 3.12, the body of an ``async def`` task only starts on a later turn of
    the loop, not within the call. From 3.12 on, it starts eagerly and runs up to its first
    suspension within the call.

    A :class:`concurrent.futures.Future` returned while no event loop is running (e.g., from
    ``executor.submit``) is waited on from the thread that completes it. Any follow-up then also
    starts from that thread.

    Errors:

    * Exceptions raised synchronously by the task propagate to the caller that started the
      execution, and the coalescer returns to idle.
    * Awaitables that fail (or are cancelled) are discarded silently. A pending follow-up still
      runs.

    .. note::

      Coalescers are meant to be used from a single thread (typically the thread running the
      event loop) and hold no lock.
    """

    def __init__(self, task: Callable[..., Any]):
        """
        :param task: The wrapped unit of work.
        """
        if not callable(task):
            raise TypeError(f"Expected a callable task but got {task!r}.")
        self._task = task
        self._is_running = False
        self._has_pending = False
        self._last_args: Optional[Arguments] = None
        self._future: Optional[Settlement] = None
        functools.update_wrapper(self, task)

    @property
    def task(self):
        return self._task

    @property
    def is_running(self) -> bool:
        """``True`` from the moment the task is called until it returns or its awaitable settles."""
        return self._is_running

    @property
    def has_pending(self) -> bool:
        """``True`` if at least one call arrived during the current execution."""
        return self._has_pending

    @property
    def last_args(self) -> Optional[Arguments]:
        """The ``(args, kwargs)`` of the most recent call, or ``None`` if never called."""
        return self._last_args

    def __repr__(self):
        return f"{type(self).__name__}({self._task!r})"

    def __call__(self, *args, **kwargs) -> None:
        self._last_args = (args, kwargs)
        if self._is_running:
            self._has_pending = True
            LOGGER.debug(f"Coalesced call to {self!r}.")
            return
        self._run()

    def _run(self):
        # A loop rather than recursion, so that chains of synchronous follow-ups keep a flat stack.
        while True:
            args, kwargs = self._last_args
            self._is_running = True
            LOGGER.debug(f"Running {self!r}.")
            try:
                future = as_future(self._task(*args, **kwargs))
            except BaseException:
                self._is_running = False
                self._has_pending = False
                raise

            if future is not None:
                # The loop only keeps weak references to tasks.
                self._future = future
                future.add_done_callback(self._on_settled)
                return
            if not self._complete():
                return

    def _complete(self) -> bool:
        """
        Completion step. Returns ``True`` if a follow-up execution is due.
        """
        self._is_running = False
        if not self._has_pending:
            return False
        self._has_pending = False
        LOGGER.debug(f"Starting follow-up for {self!r}.")
        return True

    def _on_settled(self, future: Settlement):
        # Failures end the execution and are otherwise ignored.
        consume_exception(future)
        self._future = None
        if self._complete():
            # No caller to raise to from a done callback.
            logged_exception(LOGGER, self._run)()


def coalesce(task: Callable[..., Any]) -> Coalescer:
    """
    Decorator (or plain function) that wraps ``task`` in a :class:`Coalescer`.

    .. code-block::

        render = coalesce(redraw_canvas)
        for event in events:
            render(event)  # At most one redraw in flight, plus one follow-up.

    """
    return Coalescer(task)
