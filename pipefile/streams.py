"""
pipefile.streams - closable and named stream adapters

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging


class StreamWrapper:
    """Stream paired with a shutdown action."""

    mode = ''

    def __init__(self, stream, close=None):
        """
        Wrap a stream.

        stream: file-like object to delegate to
        close: callable run by close(), or None for no shutdown action
        """
        self._stream = stream
        self._close = close
        self.closed = False

    def __getattr__(self, attr):
        """Delegate undefined attributes to wrapped stream."""
        if attr in ('_stream', '_close') or attr.startswith('__'):
            raise AttributeError(attr)
        return getattr(self._stream, attr)

    def __iter__(self):
        # dunder methods not delegated
        return iter(self._stream)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Ensure stream is closed."""
        self.close()

    def __repr__(self):
        """String representation."""
        return (
            f"<{type(self).__name__} stream={self._stream!r} mode='{self.mode}'"
            f"{' [closed]' if self.closed else ''}>"
        )

    def readable(self):
        return False

    def writable(self):
        return False

    def seekable(self):
        return False

    def close(self):
        """Run the shutdown action, if any."""
        self.closed = True
        if self._close is None:
            return
        logging.debug('Closing %r', self)
        self._close()


class ClosableReader(StreamWrapper):
    """Readable stream with a shutdown action."""

    mode = 'r'

    def read(self, size=-1):
        return self._stream.read(size)

    def readline(self, size=-1):
        return self._stream.readline(size)

    def readable(self):
        return True


class ClosableWriter(StreamWrapper):
    """Writable stream with a shutdown action."""

    mode = 'w'

    def write(self, data):
        return self._stream.write(data)

    def flush(self):
        """Flush the wrapped stream, if it has buffers."""
        flush = getattr(self._stream, 'flush', None)
        if flush:
            flush()

    def writable(self):
        return True


class Named:
    """Immutable label for diagnostics and output paths."""

    @property
    def name(self):
        return self._name

    def __repr__(self):
        """String representation."""
        return (
            f"<{type(self).__name__} name='{self._name}' mode='{self.mode}'"
            f"{' [closed]' if self.closed else ''}>"
        )


class NamedReader(Named, ClosableReader):
    """Closable reader with a name; closing closes the wrapped reader."""

    def __init__(self, name, reader):
        super().__init__(reader, close=reader.close)
        self._name = str(name)


class NamedWriter(Named, ClosableWriter):
    """Closable writer with a name; closing closes the wrapped writer."""

    def __init__(self, name, writer):
        super().__init__(writer, close=writer.close)
        self._name = str(name)


def closable_reader(reader, close=None):
    """Give a reader the shutdown action `close`."""
    return ClosableReader(reader, close)


def closable_writer(writer, close=None):
    """Give a writer the shutdown action `close`."""
    return ClosableWriter(writer, close)


def named_reader(name, reader, close=None):
    """Named closable reader from a raw reader and shutdown action."""
    return NamedReader(name, closable_reader(reader, close))


def named_writer(name, writer, close=None):
    """Named closable writer from a raw writer and shutdown action."""
    return NamedWriter(name, closable_writer(writer, close))


def unwrap(stream):
    """Innermost stream below any number of adapters."""
    while isinstance(stream, StreamWrapper):
        stream = stream._stream
    return stream


def close_all(*actions):
    """
    Run all shutdown actions in order.
    If any fail, re-raise the first failure once all have been attempted.
    """
    first_error = None
    for action in actions:
        try:
            action()
        except Exception as exc:
            if first_error is None:
                first_error = exc
            else:
                logging.warning('Error while closing, suppressed: %s', exc)
    if first_error is not None:
        raise first_error
