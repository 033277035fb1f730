import argparse
from typing import Callable

# ---------------------------------------------------------------------------- #
#                             General Parser Helper                            #
# ---------------------------------------------------------------------------- #


def parse_bounded_int(value: str, minimum: int, maximum: int | None = None) -> int | None:
    """Parse `value` as an integer within [`minimum`, `maximum`] (no upper bound if
    `maximum` is `None`). If the value is malformed or out of range the return value
    is `None`.
    """

    try:
        parsed = int(value.strip())
    except ValueError:
        return None

    if parsed < minimum:
        return None
    if maximum is not None and parsed > maximum:
        return None
    return parsed


def bounded_int(minimum: int, maximum: int | None = None) -> Callable[[str], int]:
    """argparse `type=` callable for `parse_bounded_int`."""

    def _parse(value: str) -> int:
        parsed = parse_bounded_int(value, minimum, maximum)
        if parsed is None:
            upper = "" if maximum is None else f" and at most {maximum}"
            raise argparse.ArgumentTypeError(
                f"expected an integer of at least {minimum}{upper}, got '{value}'"
            )
        return parsed

    return _parse


# ---------------------------------------------------------------------------- #
#                               Interactive Input                              #
# ---------------------------------------------------------------------------- #


def prompt_int(
    message: str,
    minimum: int,
    maximum: int | None = None,
    *,
    input_fn: Callable[[str], str] | None = None,
) -> int:
    """Ask until the answer is an integer within bounds. EOF propagates as `EOFError`."""
    input_fn = input_fn or input
    while True:
        parsed = parse_bounded_int(input_fn(message), minimum, maximum)
        if parsed is not None:
            return parsed


# ---------------------------------------------------------------------------- #
