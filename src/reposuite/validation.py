"""Required-parameter checks shared by every GitHub operation.

A parameter is missing when it is ``None``, empty, or whitespace-only. The
first missing parameter is reported on stderr, logged, and raised as a
:class:`~reposuite.errors.ParameterError`; callers must run these checks
before issuing any request.
"""

from __future__ import annotations

from typing import Any

from .errors import ParameterError
from .logging import get_logger
from .ux import print_error


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_required(**params: Any) -> None:
    """Raise ParameterError for the first blank keyword argument, in call order."""
    for name, value in params.items():
        if is_blank(value):
            error = ParameterError(name, f"{name} is required and cannot be blank")
            print_error(str(error))
            get_logger().log_error("parameter validation failed", error=str(error), parameter=name)
            raise error


__all__ = ["is_blank", "validate_required"]
