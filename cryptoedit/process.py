import contextlib
import logging
import signal
import subprocess
import tempfile
import typing

import attr

from .utils import CHUNK_SIZE

log = logging.getLogger(__name__)

Command = typing.Sequence[str]


class Sink(typing.Protocol):
    def write(self, data: bytes) -> int:
        ...


@contextlib.contextmanager
def interrupts_ignored() -> typing.Iterator[None]:
    """
    Ignore Ctrl-C while a foreground program owns the terminal.

    The program gets the signal itself and decides what to do with it, and
    we keep waiting for it to exit instead of deleting files it has open.
    """
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, signal.SIG_DFL if previous is None else previous)


def restore_interrupts() -> None:
    signal.signal(signal.SIGINT, signal.SIG_DFL)


@attr.s(frozen=True)
class Runner:
    """
    Runs external programs: gpg, the editor.

    Programs inherit the terminal unless their output is redirected, so
    interactive programs and passphrase prompts work as normal.
    """

    def run(self,
            command: Command,
            stdout: typing.Optional[Sink] = None,
            capture_stderr: bool = False,
            interactive: bool = False) -> subprocess.CompletedProcess:
        """
        Run a command and wait for it to exit.

        When `stdout` is given the program's output is copied into it as it
        is produced. Interactive programs are left to handle Ctrl-C on their
        own. Raises OSError if the program can't be started.
        """
        log.debug(f"Running {' '.join(command)}")

        with contextlib.ExitStack() as stack:
            errors = stack.enter_context(tempfile.TemporaryFile())
            if interactive:
                stack.enter_context(interrupts_ignored())

            with subprocess.Popen(
                    command,
                    stdout=(subprocess.PIPE if stdout is not None else None),
                    stderr=(errors if capture_stderr else None),
                    preexec_fn=(restore_interrupts if interactive else None)) as process:
                if stdout is not None:
                    assert process.stdout is not None
                    for chunk in iter(lambda: process.stdout.read(CHUNK_SIZE), b''):
                        stdout.write(chunk)
                returncode = process.wait()

            errors.seek(0)
            stderr = errors.read()

        log.debug(f"{command[0]} exited with status {returncode}")
        return subprocess.CompletedProcess(command, returncode, stderr=stderr)
