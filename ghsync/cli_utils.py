"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
from functools import wraps

import click

from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .output import emit_error
from .progress import get_progress


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Progress reporter injected as ``progress``
    - Consistent error handling and exit codes
    - Errors as JSON on stderr when ``--json`` is set
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        as_json = kwargs.get('as_json', False)

        progress = get_progress(enabled=True if verbose else None)
        kwargs['progress'] = progress

        try:
            func(*args, **kwargs)
            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            progress.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            progress.error(str(e))
            if as_json:
                emit_error(str(e), type=type(e).__name__, context={'exit_code': e.exit_code})
            sys.exit(e.exit_code)
        except Exception as e:
            progress.error(f"Command failed: {e}")
            if as_json:
                emit_error(str(e), type=type(e).__name__)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


# Standard options that commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Verbose output (progress and per-repo status)'),
    'debug': click.option('--debug', is_flag=True,
                          help='Debug logging (implies --verbose)'),
    'dry_run': click.option('--dry-run', is_flag=True,
                            help='Show actions without executing'),
    'json': click.option('--json', 'as_json', is_flag=True,
                         help='Output JSON summary'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'dry_run')
        def my_command(verbose, dry_run):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
