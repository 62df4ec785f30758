"""
pipefile.buffering - buffered writer layer

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import io
import logging

from .streams import closable_writer, close_all


class _RawWriter(io.RawIOBase):
    """Present a closable writer as a raw stream to io.BufferedWriter."""

    def __init__(self, writer):
        super().__init__()
        self._writer = writer

    def writable(self):
        return True

    def write(self, data):
        data = bytes(data)
        # raw files may take only part of a chunk per call
        written = 0
        while written < len(data):
            count = self._writer.write(data[written:])
            if count is None:
                break
            if not count:
                raise OSError(f'Could not write to {self._writer!r}.')
            written += count
        return len(data)


def add_buffer(writer, size):
    """
    Buffer writes to a closable writer.
    Closing flushes the buffer and then closes `writer`.
    """
    if size <= 0:
        raise ValueError(f'Buffer size must be positive, not {size}.')
    buffered = io.BufferedWriter(_RawWriter(writer), buffer_size=size)
    logging.debug('Adding %d-byte buffer to %r', size, writer)
    return closable_writer(
        buffered, close=lambda: close_all(buffered.flush, writer.close)
    )
