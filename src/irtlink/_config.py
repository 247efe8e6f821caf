"""Runtime defaults for :mod:`irtlink`."""

from __future__ import annotations

import logging
from typing import Any, Literal

_VALID_OPTIMIZERS = ("Nelder-Mead", "BFGS", "Powell")

_DEFAULT_OPTIMIZER: Literal["Nelder-Mead", "BFGS", "Powell"] = "Nelder-Mead"
_DEFAULT_PRECISION: int = 4


def set_default_optimizer(method: Literal["Nelder-Mead", "BFGS", "Powell"]) -> None:
    """Set the scipy method used by the default linking minimizer."""
    global _DEFAULT_OPTIMIZER

    if method not in _VALID_OPTIMIZERS:
        raise ValueError(
            f"Invalid optimizer '{method}'. Must be one of: "
            + ", ".join(f"'{m}'" for m in _VALID_OPTIMIZERS)
        )

    _DEFAULT_OPTIMIZER = method


def get_default_optimizer() -> Literal["Nelder-Mead", "BFGS", "Powell"]:
    """Get the scipy method used by the default linking minimizer."""
    return _DEFAULT_OPTIMIZER


def set_default_precision(precision: int) -> None:
    """Set the number of decimals used when reporting linking coefficients."""
    global _DEFAULT_PRECISION

    if not isinstance(precision, int) or precision < 0:
        raise ValueError(f"precision must be a non-negative integer, got {precision}")

    _DEFAULT_PRECISION = precision


def get_default_precision() -> int:
    """Get the number of decimals used when reporting linking coefficients."""
    return _DEFAULT_PRECISION


def set_log_level(level: int | str) -> None:
    """Set the level of the ``irtlink`` package logger."""
    logging.getLogger("irtlink").setLevel(level)


def get_config() -> dict[str, Any]:
    """Get a snapshot of the current runtime defaults."""
    return {
        "optimizer": _DEFAULT_OPTIMIZER,
        "precision": _DEFAULT_PRECISION,
        "log_level": logging.getLevelName(
            logging.getLogger("irtlink").getEffectiveLevel()
        ),
    }
