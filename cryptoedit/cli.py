import functools
import logging
import os.path
import pathlib
import typing

import click
from click.core import ParameterSource

from . import __doc__, __version__, edit
from .config import DEFAULT_EDITOR, DEFAULT_GPG, Config

log = logging.getLogger(__name__)


@functools.lru_cache()
def rel(path: pathlib.Path) -> str:
    """
    Convert a path to a relative Path.

    Returns a string as these should only be used for presentation.
    """
    return os.path.relpath(path.as_posix(), pathlib.Path.cwd().as_posix())


def enc(path: pathlib.Path) -> str:
    """Style a path to a encrypted file."""
    return click.style(rel(path), fg='green')


class PathType(click.Path):
    def convert(self, value, param, ctx):
        return pathlib.Path(super().convert(value, param, ctx))


@click.command(help=__doc__)
@click.argument(
    'path',
    type=PathType(dir_okay=False),
    required=True)
@click.option(
    '-s', '--symmetric', 'symmetric',
    default=False,
    is_flag=True,
    help="Encrypt with a passphrase instead of for recipients.")
@click.option(
    '-r', '--recipient', 'recipients',
    metavar='ID',
    envvar='CRYPTOEDIT_RECIPIENTS',
    multiple=True,
    type=click.STRING,
    help="Forwarded directly to gpg --recipient. Defaults to your git email.")
@click.option(
    '-g', '--gpg', 'gpg',
    metavar='PATH',
    envvar='CRYPTOEDIT_GPG',
    default=DEFAULT_GPG,
    show_default=True,
    help="The gpg binary to use.")
@click.option(
    '-e', '--editor', 'editor',
    metavar='COMMAND',
    envvar='EDITOR',
    default=DEFAULT_EDITOR,
    show_default=True,
    help="Defaults to $EDITOR.")
@click.option(
    '-d', '--debug', 'debug',
    default=False,
    is_flag=True,
    help="Enable debug logging.")
@click.option(
    '-v', '--verbose', 'gpg_verbose',
    default=False,
    is_flag=True,
    help="Display GPG's normal STDERR output.")
@click.version_option(__version__, '--version', prog_name='cryptoedit')
@click.pass_context
def main(
        ctx,
        path: pathlib.Path,
        symmetric: bool,
        recipients: typing.Sequence[str],
        gpg: str,
        editor: str,
        debug: bool,
        gpg_verbose: bool):
    logging.basicConfig(level=(logging.DEBUG if debug else logging.WARNING))

    if symmetric and recipients:
        if ctx.get_parameter_source('recipients') is ParameterSource.COMMANDLINE:
            raise click.UsageError("--symmetric and --recipient can't be used together")
        log.debug("Ignoring $CRYPTOEDIT_RECIPIENTS as --symmetric was given")
        recipients = ()

    config = Config(
        symmetric=symmetric,
        recipients=recipients,
        gpg=gpg,
        editor=editor,
        verbose=gpg_verbose)

    result = edit.run(path, config)

    if result.editor_error:
        click.secho(
            f"{result.editor_error} - your edits may not have been saved",
            fg='yellow', err=True)

    if result.outcome is edit.Outcome.UNCHANGED:
        click.echo(f"No changes were made to {enc(path)}, not encrypting")
    elif result.outcome is edit.Outcome.CREATED:
        click.echo(f"Created {enc(path)}")
    else:
        click.echo(f"Encrypted {enc(path)}")
