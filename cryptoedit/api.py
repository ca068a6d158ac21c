import os
import pathlib
import typing

from . import edit
from .config import DEFAULT_EDITOR, DEFAULT_GPG, Config


def run(
        path: typing.Union[str, pathlib.Path],
        symmetric: bool = False,
        recipients: typing.Iterable[str] = (),
        gpg: str = DEFAULT_GPG,
        editor: typing.Optional[str] = None) -> edit.Result:
    """
    Edit an encrypted file.

    Pass `symmetric=True` to use a passphrase, otherwise the file is
    encrypted for `recipients`, or for the email in git's configuration if
    none are given. The editor defaults to $EDITOR.
    """
    config = Config(
        symmetric=symmetric,
        recipients=recipients,
        gpg=gpg,
        editor=editor or os.environ.get('EDITOR') or DEFAULT_EDITOR)
    return edit.run(pathlib.Path(path), config)
