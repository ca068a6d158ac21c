import logging
import pathlib
import subprocess
import typing

import attr

from .process import Runner, Sink
from .utils import CryptoeditException

log = logging.getLogger(__name__)

EmailLookup = typing.Callable[[], str]


def resolve_recipients(
        recipients: typing.Sequence[str],
        lookup: EmailLookup) -> typing.Tuple[str, ...]:
    """
    Use the given recipients, or the user's own email if there are none.
    """
    if recipients:
        return tuple(recipients)

    log.debug("No recipients given, using the email from git")
    try:
        email = lookup()
    except CryptoeditException as error:
        raise CryptoeditException(
            f"Can't determine a recipient to encrypt for: {error.message}")
    return (email,)


@attr.s(frozen=True, kw_only=True)
class GPG:
    binary: str = attr.ib(default='gpg2')
    verbose: bool = attr.ib(default=False)
    runner: Runner = attr.ib(factory=Runner)

    def command(self, arguments: typing.Sequence[str]) -> typing.Tuple[str, ...]:
        command: typing.Tuple[str, ...] = (self.binary,)
        if self.verbose:
            command = (*command, '--verbose')
        return (*command, *arguments)

    def run(self,
            arguments: typing.Sequence[str],
            stdout: typing.Optional[Sink] = None) -> subprocess.CompletedProcess:
        """Run gpg, logging what it had to say if it fails."""
        result = self.runner.run(
            self.command(arguments),
            stdout=stdout,
            capture_stderr=not self.verbose)
        if result.returncode != 0:
            for line in (result.stderr or b'').decode('utf-8', 'replace').splitlines():
                log.error(line)
        return result

    def decrypt(self, encrypted: pathlib.Path, output: Sink) -> None:
        """Write the plaintext of an encrypted file to `output`."""
        log.debug(f"Decrypting {encrypted}")
        try:
            result = self.run(['--decrypt', str(encrypted)], stdout=output)
        except OSError as error:
            raise CryptoeditException(
                f"Can't decrypt {encrypted}: can't run {self.binary}: {error}")

        if result.returncode != 0:
            raise CryptoeditException(
                f"Can't decrypt {encrypted}: "
                f"{self.binary} exited with status {result.returncode}")

    def encrypt(
            self,
            output: pathlib.Path,
            encrypt: pathlib.Path,
            armour: bool,
            symmetric: bool,
            recipients: typing.Sequence[str] = ()) -> None:
        """Encrypt a plaintext file, overwriting `output`."""
        log.debug(f"Encrypting {encrypt} to {output}")
        args: typing.List[str] = ['--output', str(output), '--batch', '--yes']
        if armour:
            args += ['--armour']

        if symmetric:
            args += ['--symmetric']
        else:
            if not recipients:
                raise CryptoeditException(
                    f"Can't encrypt {encrypt} into {output}: no recipients")
            args += ['--encrypt']
            for recipient in recipients:
                args += ['--recipient', recipient]

        args += [str(encrypt)]

        try:
            result = self.run(args)
        except OSError as error:
            raise CryptoeditException(
                f"Can't encrypt {encrypt} into {output}: "
                f"can't run {self.binary}: {error}")

        if result.returncode != 0:
            raise CryptoeditException(
                f"Can't encrypt {encrypt} into {output}: "
                f"{self.binary} exited with status {result.returncode}")
