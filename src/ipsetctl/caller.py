from __future__ import annotations
from dataclasses import dataclass
from typing import IO, List, Optional, Sequence, Union
import logging
import shlex
import subprocess
import threading

from ipsetctl.log import TRACE

LOGGER = logging.getLogger('call')


@dataclass(frozen=True)
class Completed:
    """The process ran and exited with status 0."""

    cmd: List[str]


@dataclass(frozen=True)
class Exited:
    """The process ran and exited with a non-zero status."""

    cmd: List[str]
    returncode: int
    stderr: str


@dataclass(frozen=True)
class LaunchFailed:
    """The process could not be started at all."""

    cmd: List[str]
    cause: OSError


Outcome = Union[Completed, Exited, LaunchFailed]


def run(path: str, args: Sequence[str], stdout: Optional[IO[str]] = None) -> Outcome:
    """Run `path` with `args` and classify how it ended.

    Standard error is always captured. Standard output is discarded unless
    a `stdout` sink is given, in which case each line is written to it as
    soon as the process prints it.
    """
    cmd = [path, *args]

    LOGGER.debug('Run: %s', shlex.join(cmd))

    try:
        proc = subprocess.Popen(cmd,
                                stdout=subprocess.DEVNULL if stdout is None else subprocess.PIPE,
                                stderr=subprocess.PIPE,
                                text=True,
                                errors='replace')
    except OSError as e:
        return LaunchFailed(cmd, e)

    with proc:
        try:
            if stdout is None:
                err = proc.stderr.read()
            else:
                err = _stream(proc, stdout)
        except BaseException:
            proc.kill()
            raise

        proc.wait()

    if err:
        LOGGER.log(TRACE, 'Stderr: %s', err)

    if proc.returncode != 0:
        return Exited(cmd, proc.returncode, err)

    return Completed(cmd)


def _stream(proc: subprocess.Popen, sink: IO[str]) -> str:
    """Copy the output of `proc` to `sink` line by line, returning its stderr."""
    chunks: List[str] = []

    # stderr is drained concurrently so the process never blocks on a full pipe
    reader = threading.Thread(target=lambda: chunks.append(proc.stderr.read()),
                              daemon=True)
    reader.start()

    try:
        for line in proc.stdout:
            sink.write(line)
            if hasattr(sink, 'flush'):
                sink.flush()
    except BaseException:
        proc.kill()
        raise
    finally:
        reader.join()

    return ''.join(chunks)
