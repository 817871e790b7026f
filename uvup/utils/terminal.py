"""
Keyboard input for the interactive session.

Physical keys are read with :func:`click.getchar` and translated to the
logical :class:`~uvup.core.state.Event` values the state machine
understands. Unknown keys map to ``None`` and are ignored by the caller.

=================  ==============
Key                Event
=================  ==============
↑ / k              UP
↓ / j              DOWN
Space              TOGGLE
Enter              CONFIRM
← / h / Backspace  BACK
y                  ACCEPT
n                  REJECT
r                  REFRESH
q / Esc            QUIT
=================  ==============

Ctrl+C raises :class:`KeyboardInterrupt` (``click.getchar`` translates it).
"""

from __future__ import annotations

from typing import Dict, Optional

import click

from uvup.core.state import Event

KEY_BINDINGS: Dict[str, Event] = {
    # POSIX escape sequences
    "\x1b[A": Event.UP,
    "\x1b[B": Event.DOWN,
    "\x1b[D": Event.BACK,
    "\x1bOA": Event.UP,
    "\x1bOB": Event.DOWN,
    "\x1bOD": Event.BACK,
    # Windows scan codes
    "\xe0H": Event.UP,
    "\xe0P": Event.DOWN,
    "\xe0K": Event.BACK,
    "\x00H": Event.UP,
    "\x00P": Event.DOWN,
    "\x00K": Event.BACK,
    "k": Event.UP,
    "j": Event.DOWN,
    "h": Event.BACK,
    " ": Event.TOGGLE,
    "\r": Event.CONFIRM,
    "\n": Event.CONFIRM,
    "\x7f": Event.BACK,
    "\x08": Event.BACK,
    "y": Event.ACCEPT,
    "n": Event.REJECT,
    "r": Event.REFRESH,
    "q": Event.QUIT,
    "\x1b": Event.QUIT,
}


def key_to_event(key: str) -> Optional[Event]:
    """Translate one key press into an event, or ``None`` if unbound."""
    event = KEY_BINDINGS.get(key)
    if event is None and len(key) == 1:
        event = KEY_BINDINGS.get(key.lower())
    return event


def read_event() -> Optional[Event]:
    """Block until a key is pressed and return its event."""
    return key_to_event(click.getchar())
