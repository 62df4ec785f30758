"""
pipefile.pipes - external programs as stream filters

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import io
import os
import logging
import subprocess
import tempfile
import threading
from pathlib import Path

from .constants import BIN_DIRS, COPY_CHUNK_SIZE
from .errors import PipeFileError, SpawnError, ExecutableNotFound, ExitError
from .streams import closable_reader, closable_writer, close_all, unwrap


def find_exec(name, dirs=BIN_DIRS):
    """Locate a program in the standard binary directories."""
    for dir in dirs:
        path = Path(dir) / name
        if path.exists():
            return str(path)
    raise ExecutableNotFound(f"couldn't find executable {name}")


def _os_stream(stream, mode):
    """
    Get the file object with an OS descriptor under any adapters.
    Returns None if the stream only exists at Python level.
    """
    stream = unwrap(stream)
    raw = getattr(stream, 'raw', stream)
    if not isinstance(raw, io.FileIO) or raw.closed:
        return None
    if mode == 'w':
        # anything still buffered must precede the program's output
        stream.flush()
    elif stream is not raw:
        if not stream.seekable():
            return None
        # the buffer may hold data the program would otherwise skip
        os.lseek(raw.fileno(), stream.tell(), os.SEEK_SET)
    return stream


class _Copier:
    """Copy bytes from a reader to a writer on a helper thread."""

    def __init__(self, reader, writer, done, feeding=False):
        """
        Start copying.

        done: called once the copy ends, to close the process side
        feeding: writer is a program's stdin, which may stop accepting input
        """
        self._reader = reader
        self._writer = writer
        self._done = done
        self._feeding = feeding
        self._error = None
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        read = getattr(self._reader, 'read1', self._reader.read)
        try:
            while True:
                chunk = read(COPY_CHUNK_SIZE)
                if not chunk:
                    break
                self._writer.write(chunk)
        except BrokenPipeError as exc:
            if not self._feeding:
                self._error = exc
            # otherwise the program's exit status tells what went wrong
            logging.debug('Pipe to %r closed early', self._writer)
        except Exception as exc:
            self._error = exc
        finally:
            try:
                self._done()
            except BrokenPipeError:
                pass
            except Exception as exc:
                if self._error is None:
                    self._error = exc

    def join(self):
        """Wait for the copy to end; return the error it ran into, if any."""
        self._thread.join()
        return self._error


class Stage:
    """External program with one end wired to a stream, the other to a pipe."""

    def __init__(self, command, stdin=None, stdout=None):
        """
        Start the program.

        command: executable followed by its arguments
        stdin: stream for the program to read; if None, the caller writes to `pipe`
        stdout: stream for the program to write; if None, the caller reads from `pipe`
        """
        self.command = tuple(str(_arg) for _arg in command)
        if not self.command:
            raise SpawnError('No program given.')
        if (stdin is None) == (stdout is None):
            raise ValueError('Exactly one of `stdin` and `stdout` must be given.')
        stdin_os = _os_stream(stdin, 'r') if stdin is not None else None
        stdout_os = _os_stream(stdout, 'w') if stdout is not None else None
        self._stderr = tempfile.TemporaryFile()
        try:
            self.process = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE if stdin_os is None else stdin_os.fileno(),
                stdout=subprocess.PIPE if stdout_os is None else stdout_os.fileno(),
                stderr=self._stderr,
            )
        except FileNotFoundError as e:
            self._stderr.close()
            raise ExecutableNotFound(
                f"couldn't find executable {self.command[0]}"
            ) from e
        except OSError as e:
            self._stderr.close()
            raise SpawnError(
                f"couldn't start process {' '.join(self.command)}: {e}"
            ) from e
        logging.debug(
            'Started process %d: %s', self.process.pid, ' '.join(self.command)
        )
        self._copier = None
        if stdin is None:
            self.pipe = self.process.stdin
            if stdout_os is None:
                self._copier = _Copier(
                    self.process.stdout, stdout, done=self.process.stdout.close
                )
        else:
            self.pipe = self.process.stdout
            if stdin_os is None:
                self._copier = _Copier(
                    stdin, self.process.stdin, done=self.process.stdin.close,
                    feeding=True
                )

    def __repr__(self):
        """String representation."""
        return f"<{type(self).__name__} command='{' '.join(self.command)}'>"

    def close(self):
        """Close the caller's end of the pipe, then wait for the program to exit."""
        close_all(self._close_pipe, self.wait)

    def _close_pipe(self):
        try:
            self.pipe.close()
        except BrokenPipeError:
            # the program stopped reading; its exit status tells why
            logging.debug('Broken pipe on closing input of %r', self)

    def wait(self):
        """
        Wait for the program to exit.
        Raise the copy helper's error if it failed, else ExitError on
        non-zero status.
        """
        returncode = self.process.wait()
        logging.debug(
            'Process %d exited with code %d', self.process.pid, returncode
        )
        copy_error = self._copier.join() if self._copier else None
        message = self._read_message()
        if copy_error:
            if returncode:
                # the broken copy came first and likely killed the program
                logging.warning(
                    'After copy error: %s',
                    ExitError(self.command, returncode, message)
                )
            raise copy_error
        if returncode:
            raise ExitError(self.command, returncode, message)

    def _read_message(self):
        """First non-empty line of the program's error output."""
        message = ''
        self._stderr.seek(0)
        for line in self._stderr:
            line = line.decode('utf-8', errors='replace').strip()
            if line:
                message = line
                break
        self._stderr.close()
        return message


def spawn_pipe_writer(downstream, program, *args):
    """
    Start a program writing to `downstream` and return a writer to its input.
    Closing the writer ends the input and waits for the program to exit.
    """
    stage = Stage((program, *args), stdout=downstream)
    return closable_writer(stage.pipe, close=stage.close)


def spawn_pipe_reader(upstream, program, *args):
    """
    Start a program reading from `upstream` and return a reader on its output.
    Closing the reader ends the output and waits for the program to exit.
    """
    stage = Stage((program, *args), stdin=upstream)
    return closable_reader(stage.pipe, close=stage.close)


def chain_to_writer(final_writer, programs):
    """
    Run a pipeline of programs, each one's output feeding the next.

    final_writer: stream receiving the output of the last program
    programs: sequence of commands, each an executable followed by arguments

    Returns a writer to the input of the first program. Closing it waits for
    every program to exit and raises the first error encountered.
    """
    programs = [tuple(_prog) for _prog in programs]
    if not programs:
        raise ValueError('Pipeline needs at least one program.')
    # ordered from the head of the pipeline towards its output
    stages = []
    writer = final_writer
    for command in reversed(programs):
        try:
            writer = spawn_pipe_writer(writer, *command)
        except SpawnError:
            logging.debug(
                'Closing %d started stage(s) after failing to start `%s`',
                len(stages), ' '.join(map(str, command))
            )
            try:
                close_all(*(_stage.close for _stage in stages))
            except (PipeFileError, OSError) as exc:
                logging.warning('Error while closing pipeline: %s', exc)
            raise
        stages.insert(0, writer)
    return closable_writer(
        writer, close=lambda: close_all(*(_stage.close for _stage in stages))
    )
