#!/usr/bin/env python3

import sys

import click

from ghsync import __version__
from ghsync.commands.sync import sync_handler
from ghsync.config import config_to_default_map, load_config
from ghsync.exit_codes import GENERAL_ERROR, SUCCESS

# ghsync is a single command; the sync command is the whole CLI
cli = click.version_option(__version__, prog_name='ghsync')(sync_handler)


def main(args=None):
    """
    Console entry point.

    Option defaults come from the config file. Usage errors exit 1 and
    running without arguments shows the help.
    """
    if args is None:
        args = sys.argv[1:]
    if not args:
        args = ['--help']

    default_map = config_to_default_map(load_config())

    try:
        rv = cli.main(args=list(args), prog_name='ghsync',
                      standalone_mode=False, default_map=default_map)
    except click.ClickException as e:
        e.show()
        sys.exit(GENERAL_ERROR)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(GENERAL_ERROR)

    sys.exit(rv if isinstance(rv, int) else SUCCESS)


if __name__ == "__main__":
    main()
