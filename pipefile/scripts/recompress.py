"""
Copy a file, changing compression by suffix and piping through filters
(c) 2024 Rob Hagemans, licence: https://opensource.org/licenses/MIT
"""

import sys
import shlex
import shutil
import argparse
import logging

import pipefile
from pipefile.constants import COPY_CHUNK_SIZE
from pipefile.plumbing import wrap_main


STDIO = '-'


def _open_input(infile):
    if infile == STDIO:
        return pipefile.named_reader('<stdin>', sys.stdin.buffer)
    return pipefile.open_file(infile)


def _open_output(outfile, buffer_size):
    if outfile == STDIO:
        return pipefile.named_writer(
            '<stdout>', sys.stdout.buffer, close=sys.stdout.buffer.flush
        )
    return pipefile.create_file_buffered(outfile, buffer_size)


def recompress(infile, outfile, filters=(), buffer_size=0):
    """
    Copy `infile` to `outfile`, decompressing and compressing by suffix.

    filters: commands, as argument lists, to pipe the data through on the way
    buffer_size: output buffer size; 0 for the default, negative for none
    """
    with _open_input(infile) as instream:
        with _open_output(outfile, buffer_size) as outstream:
            if filters:
                logging.debug(
                    'Piping %s through %d filter(s)', instream.name, len(filters)
                )
                with pipefile.chain_to_writer(outstream, filters) as pipeline:
                    shutil.copyfileobj(instream, pipeline, COPY_CHUNK_SIZE)
            else:
                shutil.copyfileobj(instream, outstream, COPY_CHUNK_SIZE)
            logging.debug('Copied %s to %s', instream.name, outstream.name)


def main():
    # parse command line
    parser = argparse.ArgumentParser(
        description=(
            'Copy a file, decompressing and compressing according to '
            'the file name suffixes (.gz, .bz2, .xz).'
        )
    )
    parser.add_argument(
        'infile', nargs='?', type=str, default=STDIO,
        help='file to read. if not given or `-`, read from standard input'
    )
    parser.add_argument(
        'outfile', nargs='?', type=str, default=STDIO,
        help='file to write. if not given or `-`, write to standard output'
    )
    parser.add_argument(
        '--filter', type=str, action='append', default=[],
        help=(
            'external command to pipe the data through, e.g. "sort -u". '
            'may be given multiple times to build a pipeline'
        )
    )
    parser.add_argument(
        '--buffer-size', type=int, default=0,
        help='output buffer size in bytes. 0 for the default, negative for none'
    )
    parser.add_argument(
        '--debug', action='store_true',
        help='show debugging output'
    )
    parser.add_argument(
        '--version', action='version', version=f'pipefile v{pipefile.__version__}'
    )
    args = parser.parse_args()

    with wrap_main(args.debug):
        filters = [shlex.split(_filter) for _filter in args.filter]
        recompress(args.infile, args.outfile, filters, args.buffer_size)


if __name__ == '__main__':
    main()
