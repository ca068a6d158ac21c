import logging
import pathlib
import shlex
import typing

import attr

from .process import Runner

log = logging.getLogger(__name__)


@attr.s(frozen=True, kw_only=True)
class Editor:
    command: str = attr.ib()
    runner: Runner = attr.ib(factory=Runner)

    def arguments(self, path: pathlib.Path) -> typing.List[str]:
        return [*shlex.split(self.command), str(path)]

    def edit(self, path: pathlib.Path) -> typing.Optional[str]:
        """
        Open a file in the editor and wait for it to exit.

        Returns a description of the problem if the editor failed, as the
        file may still have been saved before it did.
        """
        log.debug(f"Editing {path} with {self.command}")
        try:
            result = self.runner.run(self.arguments(path), interactive=True)
        except (OSError, ValueError) as error:
            return f"Can't run editor {self.command!r}: {error}"

        if result.returncode != 0:
            return f"Editor {self.command!r} exited with status {result.returncode}"
        return None
