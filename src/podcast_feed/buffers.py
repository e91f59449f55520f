from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from podcast_feed.errors import FeedWriteError


class ByteSink(Protocol):
    def write(self, data: bytes, /) -> int | None: ...


def write_all(sink: ByteSink, data: bytes) -> None:
    """Write every byte of ``data`` to ``sink``, retrying after short writes.

    Raw streams may accept fewer bytes than offered and report the count. A
    sink that returns ``None`` (buffered streams) is taken to have written
    everything; one that reports ``0`` bytes cannot make progress.
    """
    pending: bytes | memoryview = data
    while pending:
        written = sink.write(pending)
        if written is None or written >= len(pending):
            return
        if written <= 0:
            raise FeedWriteError(f"Failed to write feed: sink accepted 0 of {len(pending)} remaining bytes")
        pending = memoryview(pending)[written:]


class ByteBuffer:
    """Growable byte buffer whose allocation survives :meth:`reset`.

    The logical length is tracked separately from the underlying bytearray, so a
    buffer grown once can be filled again without reallocating.
    """

    def __init__(self, size_hint: int = 0) -> None:
        self._data = bytearray()
        self._length = 0
        if size_hint > 0:
            self.grow(size_hint)

    def __len__(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return len(self._data)

    def grow(self, n: int) -> None:
        """Make room for at least ``n`` more bytes without another allocation."""
        missing = self._length + n - len(self._data)
        if missing > 0:
            self._data.extend(bytes(missing))

    def write(self, data: bytes) -> int:
        end = self._length + len(data)
        self._data[self._length : end] = data
        self._length = end
        return len(data)

    def reset(self) -> None:
        self._length = 0

    def getvalue(self) -> bytes:
        # The views must be released before the bytearray can be resized again.
        with memoryview(self._data) as view, view[: self._length] as written:
            return bytes(written)

    def write_to(self, sink: ByteSink) -> None:
        write_all(sink, self.getvalue())


class BufferPool:
    """Thread-safe store of reusable :class:`ByteBuffer` instances.

    Buffers are cleared when borrowed and again when returned, so no caller ever
    sees another caller's bytes. At most ``max_buffers`` idle buffers are kept,
    and when ``max_retained_capacity`` is set, buffers that grew beyond it are
    dropped on return instead of pinning their memory.
    """

    def __init__(self, *, max_buffers: int = 16, max_retained_capacity: int | None = None) -> None:
        if max_buffers < 0:
            raise ValueError("max_buffers must be >= 0")
        if max_retained_capacity is not None and max_retained_capacity < 0:
            raise ValueError("max_retained_capacity must be >= 0")
        self.max_buffers = max_buffers
        self.max_retained_capacity = max_retained_capacity
        self._lock = threading.Lock()
        self._free: list[ByteBuffer] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)

    def get(self) -> ByteBuffer:
        with self._lock:
            buf = self._free.pop() if self._free else None
        if buf is None:
            return ByteBuffer()
        buf.reset()
        return buf

    def put(self, buf: ByteBuffer) -> None:
        if self.max_retained_capacity is not None and buf.capacity > self.max_retained_capacity:
            return
        buf.reset()
        with self._lock:
            if len(self._free) < self.max_buffers:
                self._free.append(buf)

    @contextmanager
    def borrow(self) -> Iterator[ByteBuffer]:
        buf = self.get()
        try:
            yield buf
        finally:
            self.put(buf)


_default_pool = BufferPool()


def default_buffer_pool() -> BufferPool:
    """Return the process-wide pool used when no pool is passed explicitly."""
    return _default_pool
