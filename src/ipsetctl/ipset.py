from typing import IO, List, Optional
import errno
import logging
import os
import shlex
import shutil

from ipsetctl import caller
from ipsetctl.config import IPSET_EXECUTABLE

LOGGER = logging.getLogger('ipset')

# Trailing option tokens understood by ipset
IPV6 = '-6'
SUPPRESS_ERRORS = '-!'


class NotFoundError(RuntimeError):

    def __init__(self, name: str):
        self.name = name

        super().__init__(f'Cannot find {name} executable')


class IPsetError(RuntimeError):

    def __init__(self, cmd: List[str], returncode: int, msg: str):
        self.cmd = cmd
        self.returncode = returncode
        self.msg = msg.rstrip('\r\n')

        super().__init__(f'running {shlex.join(cmd)}: exit status {returncode}: {self.msg}')


class IPset:
    """Wrapper around the ipset executable."""

    def __init__(self, name: str = IPSET_EXECUTABLE):
        path = shutil.which(name)
        if path is None:
            cause = FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)
            raise NotFoundError(name) from cause

        self._path = os.path.abspath(path)

        LOGGER.debug('Using ipset executable: %s', self._path)

    @property
    def path(self) -> str:
        return self._path

    def create(self, setname: str, typename: str, *opts: str):
        self.run('create', setname, typename, *opts)

    def destroy(self, setname: str):
        self.run('destroy', setname)

    def set_exists(self, setname: str) -> bool:
        """Check if a set exists.

        ipset exits with status 1 when listing an unknown set. Any other
        failure is raised as an IPsetError.
        """
        try:
            self.run('list', setname)
        except IPsetError as e:
            if e.returncode == 1:
                return False

            raise

        return True

    def add(self, setname: str, addr: str, *opts: str):
        self.run('add', setname, addr, *opts)

    def delete(self, setname: str, addr: str, *opts: str):
        self.run('del', setname, addr, *opts)

    def flush(self, setname: str):
        self.run('flush', setname)

    def list(self, setname: str, stdout: IO[str]):
        """Write the header and members of a set to `stdout`."""
        self.run('list', setname, stdout=stdout)

    def run(self, *args: str, stdout: Optional[IO[str]] = None):
        """Run ipset with `args`, raising IPsetError if it exits non-zero.

        OSErrors from starting the process are raised unchanged.
        """
        outcome = caller.run(self._path, args, stdout)

        if isinstance(outcome, caller.Completed):
            return

        if isinstance(outcome, caller.Exited):
            raise IPsetError(outcome.cmd, outcome.returncode, outcome.stderr)

        if isinstance(outcome, caller.LaunchFailed):
            raise outcome.cause

        raise TypeError(f'Unexpected outcome: {outcome!r}')
