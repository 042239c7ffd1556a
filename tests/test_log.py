import logging

import pytest

from ipsetctl import log


def test_setup_registers_trace_level():
    log.setup()
    log.setup()

    assert logging.TRACE == log.TRACE
    assert logging.getLevelName(log.TRACE) == 'TRACE'
    assert hasattr(logging.getLogger('ipset'), 'trace')


def test_add_level_refuses_existing_name():
    log.setup()

    with pytest.raises(AttributeError):
        log.add_level('TRACE', log.TRACE)

    with pytest.raises(AttributeError):
        log.add_level('VERBOSE', 7, method='debug')
