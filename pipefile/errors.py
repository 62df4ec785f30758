"""
pipefile.errors - exception classes

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""


class PipeFileError(Exception):
    """Base class for pipefile errors."""


class UnknownSuffix(PipeFileError, ValueError):
    """Suffix token does not select a known codec."""

    def __init__(self, suffix):
        self.suffix = suffix
        super().__init__(f"Unknown suffix '{suffix}'")


class CodecInitError(PipeFileError):
    """In-process codec could not be set up on the stream."""


class SpawnError(PipeFileError):
    """External program could not be started."""


class ExecutableNotFound(SpawnError):
    """External program could not be located."""


class ExitError(PipeFileError):
    """External program exited with non-zero status."""

    def __init__(self, command, returncode, message=''):
        self.command = tuple(command)
        self.returncode = returncode
        self.message = message
        text = f"`{' '.join(self.command)}` exited with code {returncode}"
        if message:
            text = f'{text}: {message}'
        super().__init__(text)
