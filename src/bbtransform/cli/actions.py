"""Custom argparse actions with environment variable defaults.

An option's default can be supplied through ``BBTRANSFORM_<DEST>``, e.g.
``BBTRANSFORM_FORMAT=tree``. Command line values always win.
"""

from __future__ import annotations

#  Copyright (c) 2025 Tom Villani, Ph.D.
import argparse
import logging
import os
from typing import Any, Callable, Optional, Sequence, Union

from bbtransform.constants import ENV_VAR_PREFIX

logger = logging.getLogger(__name__)


def env_var_name(dest: str) -> str:
    """Return the environment variable consulted for an option's default."""
    return f"{ENV_VAR_PREFIX}{dest.upper().replace('-', '_').replace('.', '_')}"


def parse_positive_int(value: str) -> int:
    """Convert an argument to a positive integer.

    Raises
    ------
    argparse.ArgumentTypeError
        If the value is not an integer greater than zero

    """
    try:
        ivalue = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"{value!r} is not a valid integer") from e
    if ivalue <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} is not a positive integer")
    return ivalue


class EnvDefaultStoreAction(argparse.Action):
    """Store action whose default may come from a ``BBTRANSFORM_*`` variable."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        nargs: Optional[Union[int, str]] = None,
        const: Optional[Any] = None,
        default: Optional[Any] = None,
        type: Optional[Callable[[str], Any]] = None,
        choices: Optional[Sequence[Any]] = None,
        required: bool = False,
        help: Optional[str] = None,
        metavar: Optional[Union[str, tuple[str, ...]]] = None,
    ) -> None:
        env_key = env_var_name(dest)
        env_value = os.environ.get(env_key)
        if env_value is not None:
            try:
                converted = type(env_value) if type is not None else env_value
            except (ValueError, TypeError, argparse.ArgumentTypeError) as e:
                logger.warning(f"Invalid environment variable {env_key}={env_value}: {e}")
            else:
                if choices is not None and converted not in choices:
                    logger.warning(f"Invalid environment variable {env_key}={env_value}: expected one of {choices}")
                else:
                    default = converted

        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=nargs,
            const=const,
            default=default,
            type=type,
            choices=choices,
            required=required,
            help=help,
            metavar=metavar,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        setattr(namespace, self.dest, values)
