import pathlib
import subprocess
import tempfile
import typing

import attr
import click.testing
import pytest

import cryptoedit.cli
import cryptoedit.edit

# The fake gpg "encrypts" by prefixing the plaintext with this marker.
SEAL = b'encrypted:'


def seal(path: pathlib.Path, plaintext: bytes) -> pathlib.Path:
    path.write_bytes(SEAL + plaintext)
    return path


def unseal(path: pathlib.Path) -> bytes:
    contents = path.read_bytes()
    assert contents.startswith(SEAL), f"{path} was not written by gpg"
    return contents[len(SEAL):]


@attr.s
class FakeRunner:
    """
    Stands in for gpg and the editor.

    gpg commands read and write files sealed with SEAL; anything else is the
    editor, which writes `edit` to the file it was given (if it's set).
    """

    edit: typing.Optional[bytes] = attr.ib(default=None)
    editor_status: int = attr.ib(default=0)
    decrypt_status: int = attr.ib(default=0)
    encrypt_status: int = attr.ib(default=0)
    interrupt: bool = attr.ib(default=False)
    missing: typing.Set[str] = attr.ib(factory=set)
    calls: typing.List[typing.Tuple[str, ...]] = attr.ib(factory=list)
    seen: typing.List[bytes] = attr.ib(factory=list)
    captures: typing.List[bool] = attr.ib(factory=list)
    interactive: typing.List[bool] = attr.ib(factory=list)

    @property
    def decryptions(self):
        return [c for c in self.calls if '--decrypt' in c]

    @property
    def encryptions(self):
        return [c for c in self.calls if '--output' in c]

    @property
    def edits(self):
        return [c for c in self.calls if '--decrypt' not in c and '--output' not in c]

    def run(self, command, stdout=None, capture_stderr=False, interactive=False):
        command = tuple(command)
        self.calls.append(command)
        self.captures.append(capture_stderr)
        self.interactive.append(interactive)
        if command[0] in self.missing:
            raise FileNotFoundError(2, 'No such file or directory', command[0])

        if '--decrypt' in command:
            return self.decrypt(command, stdout)
        if '--output' in command:
            return self.encrypt(command)
        return self.editor(command)

    def decrypt(self, command, stdout):
        if self.decrypt_status:
            # Some output may already have been written before gpg gives up.
            stdout.write(b'partial')
            return subprocess.CompletedProcess(
                command, self.decrypt_status,
                stderr=b'gpg: decryption failed: No secret key\n')

        plaintext = unseal(pathlib.Path(command[-1]))
        half = len(plaintext) // 2
        stdout.write(plaintext[:half])
        stdout.write(plaintext[half:])
        return subprocess.CompletedProcess(command, 0, stderr=b'')

    def encrypt(self, command):
        if self.encrypt_status:
            return subprocess.CompletedProcess(
                command, self.encrypt_status,
                stderr=b'gpg: bob@example.invalid: skipped: No public key\n')

        output = pathlib.Path(command[command.index('--output') + 1])
        seal(output, pathlib.Path(command[-1]).read_bytes())
        return subprocess.CompletedProcess(command, 0, stderr=b'')

    def editor(self, command):
        path = pathlib.Path(command[-1])
        self.seen.append(path.read_bytes())
        if self.edit is not None:
            path.write_bytes(self.edit)
        if self.interrupt:
            raise KeyboardInterrupt
        return subprocess.CompletedProcess(command, self.editor_status)


@pytest.fixture()
def temporary(tmp_path, monkeypatch) -> pathlib.Path:
    """A private temporary directory, so leftover plaintext can be found."""
    directory = tmp_path / 'tmp'
    directory.mkdir()
    monkeypatch.setattr(tempfile, 'tempdir', str(directory))
    return directory


@pytest.fixture()
def encrypted(tmp_path) -> pathlib.Path:
    return seal(tmp_path / 'notes.txt.gpg', b'hello')


@pytest.fixture()
def missing(tmp_path) -> pathlib.Path:
    return tmp_path / 'new.txt.gpg'


@pytest.fixture()
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def invoke(runner, temporary, monkeypatch):
    monkeypatch.setattr(cryptoedit.edit, 'Runner', lambda: runner)
    monkeypatch.setattr(cryptoedit.edit, 'git_user_email', lambda: 'alice@example.invalid')

    def invoke_func(
            arguments: typing.Sequence[str],
            **env: str) -> click.testing.Result:
        assert all(isinstance(arg, str) for arg in arguments)
        cli_runner = click.testing.CliRunner()
        return cli_runner.invoke(
            cryptoedit.cli.main,
            arguments,
            env={'EDITOR': None, 'CRYPTOEDIT_RECIPIENTS': None, 'CRYPTOEDIT_GPG': None, **env})

    return invoke_func
