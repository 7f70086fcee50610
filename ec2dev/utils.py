"""Utility functions for ec2dev."""

import logging
import sys
from collections.abc import Callable
from typing import Any

NEGATIVE_ANSWERS = frozenset(("n", "no"))


def log_and_print_error(message: str, *args: Any) -> None:
    """Log error message and print to stderr.

    Parameters
    ----------
    message : str
        Error message with optional format placeholders
    *args : Any
        Format arguments for message
    """
    logging.debug(message, *args)
    formatted_msg = message % args if args else message
    print(f"Error: {formatted_msg}", file=sys.stderr)


def confirm_transition(target: str, input_func: Callable[[str], str] = input) -> bool:
    """Ask the operator to confirm the state change.

    The prompt defaults to yes: only an explicit ``n``/``no`` answer declines.
    Empty input and end of input both proceed.

    Parameters
    ----------
    target : str
        Target state shown in the prompt
    input_func : Callable[[str], str]
        Prompt function, replaceable in tests

    Returns
    -------
    bool
        False only when the operator declined
    """
    try:
        answer = input_func(f'Change the state to "{target}"?(Yn): ')
    except EOFError:
        answer = ""

    return answer.strip().lower() not in NEGATIVE_ANSWERS
