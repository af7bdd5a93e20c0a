"""
Common CLI utilities and decorators for consistent command behavior.
"""

import asyncio
import logging
import sys
import click
from functools import wraps

from .config import load_config, configure_logging
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .output import emit, emit_object, emit_error


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Loads config and applies its logging section
    - Runs coroutine commands on a fresh event loop
    - Clean JSON output on stdout, errors as JSON on stderr
    - Automatic --verbose/-v and --quiet/-q flags
    - Exit codes from exit_codes

    The wrapped command receives ``config`` and returns a dict (one
    object), a list (JSONL rows or a table with --pretty) or None when it
    prints for itself.
    """
    @click.option('-v', '--verbose', is_flag=True, help='Log debug output to stderr')
    @click.option('-q', '--quiet', is_flag=True, help='Suppress data output')
    @wraps(func)
    def wrapper(*args, verbose=False, quiet=False, **kwargs):
        try:
            config = load_config()
            configure_logging(config)
            if verbose:
                logging.getLogger("refscope").setLevel(logging.DEBUG)

            result = func(*args, config=config, **kwargs)
            if asyncio.iscoroutine(result):
                result = asyncio.run(result)

            pretty = kwargs.get('pretty', False)
            if quiet or result is None:
                pass
            elif isinstance(result, list):
                emit(result, pretty=pretty)
            else:
                emit_object(result, pretty=pretty)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            emit_error("Interrupted by user", type="interrupted")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            if not quiet:
                emit_error(str(e), type=type(e).__name__, context={"exit_code": e.exit_code})
            sys.exit(e.exit_code)
        except Exception as e:
            if not quiet:
                emit_error(f"Command failed: {e}", type=type(e).__name__)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


pretty_option = click.option('--pretty', is_flag=True, help='Display as a formatted table / indented JSON')
