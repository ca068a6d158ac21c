"""
Decrypt a file, edit it, and encrypt it again if it changed.
"""

import contextlib
import enum
import logging
import os
import pathlib
import tempfile
import typing

import attr

from .config import Config
from .editor import Editor
from .gpg import GPG, EmailLookup, resolve_recipients
from .process import Runner
from .utils import CryptoeditException, Fingerprint, fingerprint, git_user_email, plaintext_suffix

log = logging.getLogger(__name__)


class Outcome(enum.Enum):
    UNCHANGED = 'unchanged'
    ENCRYPTED = 'encrypted'
    CREATED = 'created'


@attr.s(frozen=True, kw_only=True)
class Result:
    outcome: Outcome = attr.ib()
    editor_error: typing.Optional[str] = attr.ib(default=None)


def exists(path: pathlib.Path) -> bool:
    try:
        path.stat()
    except FileNotFoundError:
        return False
    except OSError as error:
        raise CryptoeditException(f"Can't stat {path}: {error}")
    return True


@contextlib.contextmanager
def decrypted(
        gpg: GPG,
        encrypted: pathlib.Path,
) -> typing.Iterator[typing.Tuple[pathlib.Path, typing.Optional[str]]]:
    """
    Decrypt a file into a temporary file, deleting it on exit.

    Yields the temporary path and the fingerprint of the plaintext, which is
    None when the encrypted file doesn't exist yet.
    """
    new = not exists(encrypted)

    try:
        fd, name = tempfile.mkstemp(prefix='cryptoedit', suffix=plaintext_suffix(encrypted))
    except OSError as error:
        raise CryptoeditException(f"Can't create temporary file: {error}")

    path = pathlib.Path(name)
    log.debug(f"Created temporary file {path}")
    before: typing.Optional[str] = None
    try:
        try:
            file = os.fdopen(fd, 'wb')
        except OSError as error:
            os.close(fd)
            raise CryptoeditException(f"Can't create temporary file {path}: {error}")

        with file:
            if new:
                log.info(f"{encrypted} does not exist, creating a new encrypted file")
            else:
                sink = Fingerprint(file=file)
                gpg.decrypt(encrypted, sink)
                before = sink.hexdigest()
        yield path, before
    finally:
        log.debug(f"Deleting temporary file {path}")
        with contextlib.suppress(FileNotFoundError):
            path.unlink()


def changed(before: typing.Optional[str], after: typing.Optional[str]) -> bool:
    """Anything but two matching fingerprints counts as a change."""
    return before is None or after is None or before != after


def run(
        encrypted: pathlib.Path,
        config: Config,
        runner: typing.Optional[Runner] = None,
        lookup: typing.Optional[EmailLookup] = None) -> Result:
    runner = runner or Runner()
    lookup = lookup or git_user_email
    gpg = GPG(binary=config.gpg, verbose=config.verbose, runner=runner)
    editor = Editor(command=config.editor, runner=runner)

    recipients: typing.Tuple[str, ...] = ()
    if not config.symmetric:
        recipients = resolve_recipients(config.recipients, lookup)
        log.debug(f"Encrypting for {', '.join(recipients)}")

    with decrypted(gpg, encrypted) as (plaintext, before):
        editor_error = editor.edit(plaintext)
        if editor_error:
            log.warning(editor_error)
            if before is None:
                log.info(f"Not creating {encrypted} as the editor failed")
                return Result(outcome=Outcome.UNCHANGED, editor_error=editor_error)

        try:
            after = fingerprint(plaintext)
        except OSError as error:
            raise CryptoeditException(f"Can't read edited file {plaintext}: {error}")

        if not changed(before, after):
            log.info(f"{encrypted} was not changed, not encrypting")
            return Result(outcome=Outcome.UNCHANGED, editor_error=editor_error)

        gpg.encrypt(
            output=encrypted,
            encrypt=plaintext,
            armour=(encrypted.suffix == '.asc'),
            symmetric=config.symmetric,
            recipients=recipients)

    outcome = Outcome.CREATED if before is None else Outcome.ENCRYPTED
    return Result(outcome=outcome, editor_error=editor_error)
