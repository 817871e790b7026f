"""
Command-line interface for uvup.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration. Running ``uvup`` without
a subcommand starts the interactive ``update`` session.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from uvup.config import load_config
from uvup.__version__ import __version__
from uvup.context import UvUpContext
from uvup.exceptions import ConfigError, UvUpError
from uvup.utils.logger import get_logger, setup_logging
from uvup.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="UVUP_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="UVUP_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="uvup",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """uvup: interactive dependency updates for pyproject.toml files.

    \b
    Available commands:
      uvup update              Pick and apply updates interactively (default)
      uvup check               Report available updates without prompting

    \b
    Examples:
      uvup
      uvup update ./services --dry-run
      uvup check --outdated-only

    Use ``uvup COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    uvup_ctx = UvUpContext()
    uvup_ctx.config_path = config or loaded_config.source_path
    uvup_ctx.color = color
    uvup_ctx.verbose = verbose
    uvup_ctx.config = loaded_config
    ctx.obj = uvup_ctx

    _apply_color(color)

    logger.debug("uvup v%s, config %s", __version__, uvup_ctx.config_path or "<defaults>")
    logger.debug("Effective settings: %s", loaded_config.to_log_dict())

    if ctx.invoked_subcommand is None:
        ctx.invoke(update)


VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def _configure_logging(verbose: int) -> None:
    """Translate the ``-v`` count into a level; extra flags stay at DEBUG."""
    level = VERBOSITY_LEVELS[max(0, min(verbose, len(VERBOSITY_LEVELS) - 1))]
    setup_logging(level=level)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


def _apply_color(color: bool) -> None:
    """Export the colour choice as ``NO_COLOR`` and rebuild the rich console."""
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


# Register CLI subcommands
from uvup.commands.check import check  # noqa: E402
from uvup.commands.update import update  # noqa: E402

cli.add_command(check)
cli.add_command(update)


def main() -> int:
    """Main entry point for the uvup CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        rv = cli(standalone_mode=False)
        return rv if isinstance(rv, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except UvUpError as exc:
        print_error(str(exc))
        logger.debug(
            "UvUpError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
