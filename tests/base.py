"""
pipefile test suite
testing utilities
"""

import shutil
import tempfile
import unittest
import logging
from pathlib import Path


def requires_programs(*names):
    """Skip test if an external program is not available on this host."""
    missing = [_name for _name in names if not shutil.which(_name)]
    return unittest.skipIf(
        missing, f"program(s) not available: {', '.join(missing)}"
    )


class Recorder:
    """Writer that records writes and its close, for checking call order."""

    def __init__(self, events=None, write_error=None, close_error=None):
        self.events = [] if events is None else events
        self.data = b''
        self._write_error = write_error
        self._close_error = close_error

    def write(self, data):
        self.events.append('write')
        if self._write_error:
            raise self._write_error
        self.data += data
        return len(data)

    def close(self):
        self.events.append('close')
        if self._close_error:
            raise self._close_error


class BaseTester(unittest.TestCase):
    """Base class for testers."""

    logging.basicConfig(level=logging.WARNING)

    sample_text = (
        b'Sed ut perspiciatis unde omnis iste natus error sit voluptatem '
        b'accusantium doloremque laudantium, totam rem aperiam, eaque ipsa '
        b'quae ab illo inventore veritatis et quasi architecto beatae vitae '
        b'dicta sunt explicabo. Nemo enim ipsam voluptatem quia voluptas sit '
        b'aspernatur aut odit aut fugit.\n'
    )

    magic = {
        'gz': b'\x1f\x8b',
        'bz2': b'BZh',
        'xz': b'\xfd7zXZ\x00',
    }

    def setUp(self):
        """Setup ahead of each test."""
        bar = '-' * 20
        logging.debug('%s %s %s', bar, self.id(), bar)
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)

    def tearDown(self):
        """Clean up after each test."""
        self.temp_dir.cleanup()
