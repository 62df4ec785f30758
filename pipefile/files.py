"""
pipefile.files - open files with compression chosen by suffix

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging

from .constants import DEFAULT_BUFFER_SIZE
from .errors import UnknownSuffix
from .streams import NamedReader, NamedWriter, closable_reader, closable_writer, close_all
from .buffering import add_buffer
from .compressors import add_compression, add_decompression


def get_suffix(path):
    """Text after the final dot in the file name, or '' if there is none."""
    path = str(path)
    _, dot, suffix = path.rpartition('.')
    if not dot:
        return ''
    return suffix


def create_file(path):
    """Open file for buffered writing with the default buffer size."""
    return create_file_buffered(path, 0)


def create_file_sync(path):
    """Open file for unbuffered writing."""
    return create_file_buffered(path, -1)


def create_file_buffered(path, size):
    """
    Open file for writing, compressed if the name ends in a known suffix.

    path: file to create
    size: buffer size in bytes; 0 for the default, negative for no buffering

    Supported compression:
        gzip  (.gz)
        bzip2 (.bz2) - runs external program
        xz    (.xz)  - runs external program

    Close the returned writer to flush buffers and shut down compression.
    """
    if size == 0:
        size = DEFAULT_BUFFER_SIZE
    # unbuffered; buffering is added as a separate layer
    outstream = open(path, 'wb', buffering=0)
    suffix = get_suffix(path)
    try:
        compressed = add_compression(outstream, suffix)
    except UnknownSuffix:
        writer = outstream
    except Exception:
        outstream.close()
        raise
    else:
        writer = closable_writer(
            compressed, close=lambda: close_all(compressed.close, outstream.close)
        )
    if size > 0:
        writer = add_buffer(writer, size)
    logging.debug("Created '%s' with buffer size %d", path, max(size, 0))
    return NamedWriter(path, writer)


def open_file(path):
    """
    Open file for reading, decompressed if the name ends in a known suffix.

    Supported decompression:
        gzip  (.gz)
        bzip2 (.bz2)
        xz    (.xz) - runs external program
    """
    instream = open(path, 'rb')
    suffix = get_suffix(path)
    try:
        decompressed = add_decompression(instream, suffix)
    except UnknownSuffix:
        return NamedReader(path, instream)
    except Exception:
        instream.close()
        raise
    reader = closable_reader(
        decompressed, close=lambda: close_all(decompressed.close, instream.close)
    )
    return NamedReader(path, reader)
