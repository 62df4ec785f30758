"""
pipefile.compressors - compression layers selected by suffix

(c) 2021--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import gzip
import bz2
import zlib
import logging

from .constants import GZIP_COMPRESSION_LEVEL
from .errors import UnknownSuffix, CodecInitError
from .streams import closable_reader, closable_writer, close_all
from .pipes import find_exec, spawn_pipe_reader, spawn_pipe_writer


class CodecRegistry:
    """Retrieve codecs through suffix tokens and magic sequences."""

    def __init__(self):
        self._suffixes = {}

    def get_suffixes(self):
        """Get tuple of all registered suffix tokens."""
        return tuple(self._suffixes.keys())

    def get_for(self, suffix):
        """Get codec for suffix token; raise UnknownSuffix if there is none."""
        try:
            return self._suffixes[suffix]
        except KeyError:
            raise UnknownSuffix(suffix) from None

    def identify(self, header):
        """Get codec whose magic sequence starts `header`, or None."""
        for codec in set(self._suffixes.values()):
            if header.startswith(codec.magic):
                return codec
        return None

    def register(self, *suffixes, magic=b''):
        """Decorator to register codec class under one or more suffixes."""

        def _decorator(codec):
            codec.name = suffixes[0]
            codec.suffixes = suffixes
            codec.magic = magic
            for suffix in suffixes:
                self._suffixes[suffix] = codec
            return codec

        return _decorator


codecs = CodecRegistry()


class Codec:
    """Base class for compression strategies."""

    name = ''
    suffixes = ()
    magic = b''

    @classmethod
    def decoder(cls, instream):
        """Closable reader producing decompressed data from `instream`."""
        raise NotImplementedError

    @classmethod
    def encoder(cls, outstream):
        """Closable writer compressing into `outstream`."""
        raise NotImplementedError


@codecs.register('gz', 'gzip', magic=b'\x1f\x8b')
class GzipCodec(Codec):

    @classmethod
    def decoder(cls, instream):
        reader = gzip.GzipFile(fileobj=instream, mode='rb')
        try:
            # parse the header now, so that bad input fails here
            data = reader.peek(1)
        except (gzip.BadGzipFile, EOFError, zlib.error) as e:
            raise CodecInitError(f"couldn't create gzip reader: {e}") from e
        # mtime stays unset if no header was found at all
        if not data and reader.mtime is None:
            reader.close()
            raise CodecInitError("couldn't create gzip reader: no gzip header")
        return closable_reader(reader, close=reader.close)

    @classmethod
    def encoder(cls, outstream):
        try:
            writer = gzip.GzipFile(
                filename='', fileobj=outstream, mode='wb',
                compresslevel=GZIP_COMPRESSION_LEVEL, mtime=0,
            )
        except OSError as e:
            raise CodecInitError(f"couldn't create gzip writer: {e}") from e
        return closable_writer(
            writer, close=lambda: close_all(writer.flush, writer.close)
        )


@codecs.register('bz2', 'bzip2', magic=b'BZh')
class Bzip2Codec(Codec):

    @classmethod
    def decoder(cls, instream):
        # the decoder holds no resources of its own
        return closable_reader(bz2.BZ2File(instream, mode='rb'))

    @classmethod
    def encoder(cls, outstream):
        return spawn_pipe_writer(outstream, find_exec('bzip2'), '-z', '-c')


@codecs.register('xz', magic=b'\xfd7zXZ\x00')
class XZCodec(Codec):

    @classmethod
    def decoder(cls, instream):
        return spawn_pipe_reader(instream, find_exec('xz'), '-d', '-c')

    @classmethod
    def encoder(cls, outstream):
        return spawn_pipe_writer(outstream, find_exec('xz'), '-z', '-e', '-c')


def add_decompression(instream, suffix):
    """
    Decompress data read from `instream` according to suffix token.
    Closing the returned reader does not close `instream`.
    """
    codec = codecs.get_for(suffix)
    logging.debug("Adding %s decompression to %r", codec.name, instream)
    return codec.decoder(instream)


def add_compression(outstream, suffix):
    """
    Compress data written to `outstream` according to suffix token.
    Closing the returned writer does not close `outstream`.
    """
    codec = codecs.get_for(suffix)
    logging.debug("Adding %s compression to %r", codec.name, outstream)
    return codec.encoder(outstream)
