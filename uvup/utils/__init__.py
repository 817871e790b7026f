"""
Shared helpers for the uvup commands.

    from uvup.utils import HTTPClient, get_logger, print_error, safe_write_file

Keyboard input lives in :mod:`uvup.utils.terminal`. It depends on the
state machine's ``Event`` type and is imported directly by the interactive
command.
"""

from __future__ import annotations

from uvup.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)
from uvup.utils.filesystem import (
    create_timestamped_backup,
    find_manifest_files,
    safe_read_file,
    safe_write_file,
)
from uvup.utils.console import (
    colorize_update_type,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
    render_screen,
)
from uvup.utils.http import HTTPClient
from uvup.utils.version_utils import classify, compare

__all__ = [
    "HTTPClient",
    "classify",
    "colorize_update_type",
    "compare",
    "create_timestamped_backup",
    "disable_logging",
    "find_manifest_files",
    "get_logger",
    "get_raw_console",
    "is_logging_configured",
    "print_error",
    "print_success",
    "print_table",
    "print_warning",
    "reconfigure_console",
    "render_screen",
    "safe_read_file",
    "safe_write_file",
    "setup_logging",
]
