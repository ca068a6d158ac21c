import typing

import attr

from .utils import CryptoeditException

DEFAULT_GPG = 'gpg2'
DEFAULT_EDITOR = 'vim'


@attr.s(frozen=True, kw_only=True)
class Config:
    """Everything a single run needs to know, resolved once at startup."""

    symmetric: bool = attr.ib(default=False)
    recipients: typing.Tuple[str, ...] = attr.ib(default=(), converter=tuple)
    gpg: str = attr.ib(default=DEFAULT_GPG)
    editor: str = attr.ib(default=DEFAULT_EDITOR)
    verbose: bool = attr.ib(default=False)

    def __attrs_post_init__(self):
        if self.symmetric and self.recipients:
            raise CryptoeditException(
                "Symmetric encryption can't be used with recipients")
        if not self.gpg:
            raise CryptoeditException("No gpg binary configured")
        if not self.editor.strip():
            raise CryptoeditException("No editor configured")
