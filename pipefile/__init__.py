"""
pipefile - named, closable byte streams over files and subprocess pipelines

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import sys as _sys
assert _sys.version_info >= (3, 9)

from .constants import VERSION as __version__
from .errors import (
    PipeFileError, UnknownSuffix, CodecInitError,
    SpawnError, ExecutableNotFound, ExitError,
)
from .streams import (
    ClosableReader, ClosableWriter, NamedReader, NamedWriter,
    closable_reader, closable_writer, named_reader, named_writer, close_all,
)
from .buffering import add_buffer
from .pipes import find_exec, spawn_pipe_writer, spawn_pipe_reader, chain_to_writer
from .compressors import codecs, add_compression, add_decompression
from .files import get_suffix, create_file, create_file_sync, create_file_buffered, open_file
