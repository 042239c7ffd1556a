import argparse
import logging
import os
import sys

from ipsetctl.config import DEBUG
from ipsetctl.ipset import IPset, IPsetError, NotFoundError, IPV6, SUPPRESS_ERRORS

import ipsetctl.log as log

LOGGER = logging.getLogger('cli')

EXIT_NOT_FOUND = 127
EXIT_LAUNCH_FAILED = 126
EXIT_BROKEN_PIPE = 141


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='ipsetctl',
                                     description='Manage ipset sets')

    parser.add_argument('-6', '--ipv6', action='store_true',
                        help='append the IPv6 flag to create/add/del')
    parser.add_argument('--exist', action='store_true',
                        help='ignore errors when the set or member already exists (or does not)')
    parser.add_argument('-d', '--debug', action='store_true')

    subparsers = parser.add_subparsers(dest='command', required=True)

    cmd = subparsers.add_parser('create')
    cmd.add_argument('setname')
    cmd.add_argument('typename')
    cmd.add_argument('opts', nargs=argparse.REMAINDER)

    for name in ['add', 'del']:
        cmd = subparsers.add_parser(name)
        cmd.add_argument('setname')
        cmd.add_argument('addr')
        cmd.add_argument('opts', nargs=argparse.REMAINDER)

    for name in ['destroy', 'exists', 'flush', 'list']:
        cmd = subparsers.add_parser(name)
        cmd.add_argument('setname')

    return parser


def get_opts(args) -> list:
    opts = list(getattr(args, 'opts', []))

    if args.ipv6:
        opts.append(IPV6)
    if args.exist:
        opts.append(SUPPRESS_ERRORS)

    return opts


def execute(ipset: IPset, args) -> int:
    opts = get_opts(args)

    if args.command == 'create':
        ipset.create(args.setname, args.typename, *opts)
    elif args.command == 'destroy':
        ipset.destroy(args.setname)
    elif args.command == 'exists':
        exists = ipset.set_exists(args.setname)
        LOGGER.info('Set %s %s', args.setname, 'exists' if exists else 'does not exist')
        return 0 if exists else 1
    elif args.command == 'add':
        ipset.add(args.setname, args.addr, *opts)
    elif args.command == 'del':
        ipset.delete(args.setname, args.addr, *opts)
    elif args.command == 'flush':
        ipset.flush(args.setname)
    elif args.command == 'list':
        ipset.list(args.setname, sys.stdout)

    return 0


def exit_status(returncode: int) -> int:
    """Map a child's return code to our own exit status.

    A negative return code means the tool was killed by a signal; report it
    the way a shell does (128 + signal number).
    """
    if returncode < 0:
        return 128 - returncode

    return returncode


def silence_stdout():
    """Point stdout at devnull so the final flush at exit does not fail again."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def main(argv=None):
    args = get_parser().parse_args(argv)

    log.setup(debug=args.debug or DEBUG)

    try:
        ipset = IPset()
        rc = execute(ipset, args)
    except NotFoundError as e:
        LOGGER.error('%s', e)
        rc = EXIT_NOT_FOUND
    except IPsetError as e:
        LOGGER.error('%s', e)
        rc = exit_status(e.returncode)
    except BrokenPipeError:
        # Reader of our stdout went away, e.g. `ipsetctl list myset | head`
        silence_stdout()
        rc = EXIT_BROKEN_PIPE
    except OSError as e:
        LOGGER.error('Failed to run ipset: %s', e)
        rc = EXIT_LAUNCH_FAILED

    sys.exit(rc)


if __name__ == '__main__':
    main()
