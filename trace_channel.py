"""
Producer/consumer hand-off for traced runs.

The engine runs on a worker thread and pushes events into a bounded queue;
a presentation thread drains them at its own pace. The queue bound applies
backpressure, so the algorithm never races ahead of the consumer by more
than ``maxsize`` events.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterator, Optional
import queue
import threading

from algorithms import ShortestPathEngine
from config import TraceConfig
from graph import Graph
from node_ids import NodeId
from tracing import CancelToken, TraceEvent, TraceResult

_CLOSED = object()


class TraceChannel:
    """
    Bounded, order-preserving event queue with a single producer.

    put() blocks while the queue is full. Once the cancel token is set, a
    blocked put() gives up and drops its event so the producer can reach
    its next cancellation check. The end of the stream is also flagged
    outside the queue, so consumers stop even when the end marker itself
    could not be queued.
    """

    def __init__(
        self,
        maxsize: int,
        cancel: CancelToken,
        poll_seconds: float = 0.05,
    ) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize)
        self._cancel = cancel
        self._poll_seconds = poll_seconds
        self.dropped = 0
        self._closed = threading.Event()

    def put(self, event: TraceEvent) -> None:
        if not self._offer(event):
            self.dropped += 1

    def close(self) -> None:
        self._offer(_CLOSED)
        self._closed.set()

    def _offer(self, item: object) -> bool:
        while True:
            try:
                self._queue.put(item, timeout=self._poll_seconds)
                return True
            except queue.Full:
                if self._cancel.cancelled:
                    return False

    def __iter__(self) -> Iterator[TraceEvent]:
        while True:
            try:
                item = self._queue.get(timeout=self._poll_seconds)
            except queue.Empty:
                if self._closed.is_set():
                    return
                continue
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]

    def drain(self) -> None:
        """Discard anything still queued without blocking."""
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return


class TraceStream:
    """
    Live view of a traced run executing on a worker thread.

    Iterate to receive events in emission order; iteration ends when the
    run terminates (or the producer fails). result() returns the complete
    TraceResult and re-raises any error the run raised.
    """

    def __init__(
        self,
        channel: TraceChannel,
        future: "Future[TraceResult]",
        cancel: CancelToken,
        executor: ThreadPoolExecutor,
    ) -> None:
        self._channel = channel
        self._future = future
        self._cancel = cancel
        self._executor = executor

    def __iter__(self) -> Iterator[TraceEvent]:
        return iter(self._channel)

    @property
    def dropped(self) -> int:
        """Events recorded by the run but never handed over after cancellation."""
        return self._channel.dropped

    def cancel(self) -> None:
        self._cancel.cancel()

    def result(self, timeout: Optional[float] = None) -> TraceResult:
        return self._future.result(timeout)

    def close(self) -> None:
        """Cancel the run if still going and release the worker thread."""
        if not self._future.done():
            self._cancel.cancel()
        self._channel.drain()
        self._executor.shutdown(wait=True)
        self._channel.drain()

    def __enter__(self) -> "TraceStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def stream_traced(
    engine: ShortestPathEngine,
    graph: Graph,
    source: NodeId,
    target: NodeId,
    cancel: Optional[CancelToken] = None,
    maxsize: Optional[int] = None,
    config: Optional[TraceConfig] = None,
) -> TraceStream:
    """
    Start a traced run on a worker thread and return its live event stream.

    The graph is only read, so several streams may share one graph.
    """
    cfg = config or TraceConfig()
    token = cancel or CancelToken()
    channel = TraceChannel(maxsize or cfg.channel_maxsize, token, cfg.channel_poll_seconds)

    def produce() -> TraceResult:
        try:
            return engine.shortest_path_traced(graph, source, target, cancel=token, on_event=channel.put)
        finally:
            channel.close()

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="trace-producer")
    future = executor.submit(produce)
    return TraceStream(channel, future, token, executor)
