import hashlib
import pathlib
import typing

import attr
import click
import git

CHUNK_SIZE = 64 * 1024

ENCRYPTED_SUFFIXES = ('.gpg', '.asc', '.pgp')


class CryptoeditException(click.ClickException):
    pass


@attr.s(kw_only=True)
class Fingerprint:
    """
    Write bytes to a file while hashing them.

    Used as the destination for decrypted output so the plaintext only has
    to be read once.
    """

    file: typing.BinaryIO = attr.ib()
    digest: typing.Any = attr.ib(factory=hashlib.sha256)

    def write(self, data: bytes) -> int:
        self.digest.update(data)
        return self.file.write(data)

    def hexdigest(self) -> str:
        return self.digest.hexdigest()


def fingerprint(path: pathlib.Path) -> str:
    """Compute the fingerprint of a file's contents."""
    digest = hashlib.sha256()
    with path.open('rb') as file:
        for chunk in iter(lambda: file.read(CHUNK_SIZE), b''):
            digest.update(chunk)
    return digest.hexdigest()


def plaintext_suffix(path: pathlib.Path) -> str:
    """
    Find the extension of the plaintext inside an encrypted file.

    'notes.md.gpg' contains a '.md' file, 'notes.gpg' has no extension.
    """
    if path.suffix in ENCRYPTED_SUFFIXES:
        return pathlib.PurePath(path.stem).suffix
    return ''


def git_user_email() -> str:
    """Read the user's email address from git's configuration."""
    try:
        email = git.Git().config('--get', 'user.email')
    except git.exc.CommandError as error:
        raise CryptoeditException(
            f"Can't read user.email from git configuration: {error}")

    email = email.strip()
    if not email:
        raise CryptoeditException("No user.email is set in git configuration")
    return email
