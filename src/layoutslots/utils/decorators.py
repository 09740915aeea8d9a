#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/utils/decorators.py
"""Utility decorators for optional dependencies and timing."""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from layoutslots.exceptions import DependencyError


def requires_dependencies(feature_name: str, packages: List[Tuple[str, str]]) -> Callable:
    """Check that optional packages import before running the decorated function.

    Parameters
    ----------
    feature_name : str
        Name of the feature, used in the error message
    packages : list of tuple
        ``(install_name, import_name)`` pairs, e.g. ``("rich", "rich")``

    Returns
    -------
    Callable
        Decorated function raising DependencyError when a package is missing

    Examples
    --------
        >>> @requires_dependencies("rich output", [("rich", "rich")])
        ... def print_table(rows):
        ...     from rich.table import Table

    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            missing = []
            original_error = None
            for install_name, import_name in packages:
                try:
                    # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
                    importlib.import_module(import_name)
                except ImportError as e:
                    missing.append((install_name, ""))
                    if original_error is None:
                        original_error = e

            if missing:
                raise DependencyError(
                    feature_name,
                    missing_packages=missing,
                    original_import_error=original_error,
                ) from original_error

            return func(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log the elapsed time of a block at DEBUG level.

    Nothing is measured when DEBUG logging is disabled.

    Examples
    --------
        >>> with debug_timer(logger, "Reverse transform"):
        ...     markup = to_persisted(editor_markup)

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.3f}s")
    else:
        yield
