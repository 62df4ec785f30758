"""
pipefile test suite
buffered writer tests
"""

import unittest

import pipefile
from .base import BaseTester, Recorder


class ShortWriter(Recorder):
    """Writer that takes at most three bytes per call, like a raw file may."""

    def write(self, data):
        return super().write(bytes(data[:3]))


class TestBuffer(BaseTester):
    """Test the buffering layer."""

    def test_flush_on_close(self):
        """Buffered data reaches the wrapped writer when closed."""
        inner = Recorder()
        writer = pipefile.add_buffer(inner, 1024)
        writer.write(b'abc')
        writer.write(b'def')
        self.assertEqual(inner.data, b'')
        writer.close()
        self.assertEqual(inner.data, b'abcdef')

    def test_flush_before_close(self):
        """The buffer is flushed before the wrapped writer is closed."""
        inner = Recorder()
        writer = pipefile.add_buffer(inner, 16)
        writer.write(b'abc')
        writer.close()
        self.assertEqual(inner.events, ['write', 'close'])

    def test_large_writes(self):
        """Writes beyond the buffer size pass through before close."""
        inner = Recorder()
        writer = pipefile.add_buffer(inner, 8)
        writer.write(self.sample_text)
        self.assertTrue(inner.data)
        writer.close()
        self.assertEqual(inner.data, self.sample_text)

    def test_flush_error_wins(self):
        """A failing flush is reported, but close is still attempted."""
        inner = Recorder(
            write_error=OSError('flush failed'),
            close_error=OSError('close failed'),
        )
        writer = pipefile.add_buffer(inner, 1024)
        writer.write(b'abc')
        with self.assertRaisesRegex(OSError, 'flush failed'):
            writer.close()
        self.assertEqual(inner.events, ['write', 'close'])

    def test_close_error(self):
        """A failing close is reported after a good flush."""
        inner = Recorder(close_error=OSError('close failed'))
        writer = pipefile.add_buffer(inner, 1024)
        writer.write(b'abc')
        with self.assertRaisesRegex(OSError, 'close failed'):
            writer.close()
        self.assertEqual(inner.data, b'abc')

    def test_partial_writes(self):
        """Writes the wrapped writer only partly accepts are completed."""
        inner = ShortWriter()
        writer = pipefile.add_buffer(inner, 4)
        writer.write(b'abcdefghij')
        writer.close()
        self.assertEqual(inner.data, b'abcdefghij')
        self.assertEqual(inner.events[-1], 'close')

    def test_bad_size(self):
        """Buffer size must be positive."""
        with self.assertRaises(ValueError):
            pipefile.add_buffer(Recorder(), 0)


if __name__ == '__main__':
    unittest.main()
