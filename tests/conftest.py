"""Shared fixtures: a fake ipset executable that records how it was called."""
import os
import stat

import pytest

from ipsetctl.ipset import IPset

FAKE_IPSET = """#!/bin/sh
for arg in "$@"; do
    printf '%s\\n' "$arg" >> "$FAKE_IPSET_ARGS"
done
if [ -n "$FAKE_IPSET_STDOUT" ]; then
    printf '%s' "$FAKE_IPSET_STDOUT"
fi
if [ -n "$FAKE_IPSET_STDERR" ]; then
    printf '%b' "$FAKE_IPSET_STDERR" >&2
fi
exit "${FAKE_IPSET_EXIT:-0}"
"""


class FakeTool:
    """Controls the behaviour of the fake ipset script through its environment."""

    def __init__(self, path, args_file, monkeypatch):
        self.path = path
        self.args_file = args_file
        self.monkeypatch = monkeypatch

    def exits(self, code: int, stderr: str = '', stdout: str = ''):
        self.monkeypatch.setenv('FAKE_IPSET_EXIT', str(code))
        self.monkeypatch.setenv('FAKE_IPSET_STDERR', stderr)
        self.monkeypatch.setenv('FAKE_IPSET_STDOUT', stdout)

    @property
    def calls(self):
        if not self.args_file.exists():
            return []

        return self.args_file.read_text().splitlines()


@pytest.fixture
def fake_tool(tmp_path, monkeypatch):
    bindir = tmp_path / 'bin'
    bindir.mkdir()

    script = bindir / 'ipset'
    script.write_text(FAKE_IPSET)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    args_file = tmp_path / 'args'

    monkeypatch.setenv('PATH', str(bindir) + os.pathsep + os.environ.get('PATH', ''))
    monkeypatch.setenv('FAKE_IPSET_ARGS', str(args_file))

    tool = FakeTool(script, args_file, monkeypatch)
    tool.exits(0)

    return tool


@pytest.fixture
def ipset(fake_tool):
    return IPset('ipset')
