# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""Pooled text buffers.

Formatting calls borrow an io.StringIO from the pool instead of allocating a new one
every time. Borrowing is always scoped::

    with buffers.pool.acquire() as output:
        output.write(...)
        return output.getvalue()

so that the buffer goes back to the pool on every exit path, including when
formatting fails halfway through.
"""

import contextlib
import io
import threading
from typing import Iterator


class StringBufferPool:
    capacity: int
    """How many free buffers are retained for reuse."""

    max_retained_length: int
    """Buffers that grew past this many characters are discarded on release rather
    than retained, so that a single huge output doesn't pin its memory forever."""

    def __init__(self, capacity: int = 8, max_retained_length: int = 64 * 1024):
        self.capacity = capacity
        self.max_retained_length = max_retained_length
        self._free: list[io.StringIO] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of free buffers currently in the pool."""
        with self._lock:
            return len(self._free)

    @contextlib.contextmanager
    def acquire(self) -> Iterator[io.StringIO]:
        with self._lock:
            buffer = self._free.pop() if self._free else None
        if buffer is None:
            buffer = io.StringIO()

        try:
            yield buffer
        finally:
            self._release(buffer)

    def _release(self, buffer: io.StringIO) -> None:
        length = buffer.seek(0, io.SEEK_END)
        if length > self.max_retained_length:
            return
        buffer.seek(0)
        buffer.truncate()
        with self._lock:
            if len(self._free) < self.capacity:
                self._free.append(buffer)


pool = StringBufferPool()
"""The pool shared by all formatting calls."""
