"""
Executable module for uvup.

Running:
    python -m uvup

is equivalent to:
    uvup

This module simply forwards execution to the CLI entrypoint defined in
`uvup.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not be loaded."""
    lines = [
        "uvup could not start: a required module failed to import.",
        f"Python version : {sys.version}",
    ]
    try:
        from uvup.__version__ import __version__

        lines.append(f"uvup version   : {__version__}")
    except ImportError:
        lines.append("uvup version   : <unknown>")
    lines.append(f"ImportError: {exc}")
    sys.stderr.write("\n".join(lines) + "\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m uvup`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from uvup.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
