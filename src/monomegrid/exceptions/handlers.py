"""
Centralized error handling utilities.

This module provides the shared patterns for dealing with driver errors:

1. **Custom Exceptions** - Typed, user-friendly error classes (see base, device, usb, config)
2. **Error Collection** - Batch operations keep going and report every failure
3. **Error Context** - Critical sections log start, completion and failure
4. **Display** - Turn any exception into a message plus optional recovery hint

## Quick Reference

| Pattern | Code |
|---------|------|
| Try many ops, report all failures | `collector = collect_errors("switch all on"); with collector.try_operation(...): ...` |
| Critical section with auto-logging | `with ErrorContext("connect to monome"): ...` |
| Config file errors | `raise wrap_pydantic_error(e, str(path)) from e` |

## Example: Batch Operation

```python
from monomegrid.exceptions import collect_errors

collector = collect_errors("close row device")
for member in members:
    with collector.try_operation(f"close {member}"):
        member.close()
collector.raise_for_errors()
```

Every member is closed even when one of them fails, and the caller gets a
single AggregateError listing all causes in order.
"""

import logging
from typing import Optional

from .base import MonomeGridError
from .config import ConfigFileInvalidError, ConfigValidationError
from .device import AggregateError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("connect to monome", logger_instance=logger):
            conn = connect(dev)
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        """Enter the context."""
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Exit the context and handle any exceptions.

        Returns:
            True if exception should be suppressed, False otherwise
        """
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        if not issubclass(exc_type, Exception):
            return False

        self.error = exc_val

        if isinstance(exc_val, MonomeGridError):
            self.logger.error(
                f"Failed to {self.operation}: {exc_val.technical_message}"
            )
        else:
            self.logger.error(
                f"Failed to {self.operation}: {exc_val}",
                exc_info=True
            )

        return not self.re_raise


def wrap_pydantic_error(error: Exception, file_path: str) -> MonomeGridError:
    """
    Convert Pydantic validation errors to monomegrid exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, AggregateError):
        lines = [error.user_message + ":"]
        lines.extend(f"  - {cause}" for cause in error.errors)
        return "\n".join(lines), error.recovery_hint

    if isinstance(error, MonomeGridError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for batch operations.

    Args:
        operation: Description of the overall operation; becomes the
            task of the resulting AggregateError

    Returns:
        ErrorCollector instance
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """
    Collects multiple errors during batch operations.

    Allows operations to continue even if some fail, then
    report all failures at once as an AggregateError.
    """

    def __init__(self, operation: str):
        """
        Initialize error collector.

        Args:
            operation: Description of the overall operation
        """
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        """Check if any errors were collected."""
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        """Get the number of errors collected."""
        return len(self.errors)

    def add(self, sub_operation: str, error: Exception) -> None:
        """Record a failure that was caught elsewhere."""
        self.errors.append((sub_operation, error))

    def try_operation(self, sub_operation: str):
        """
        Context manager for a single operation within the batch.

        Args:
            sub_operation: Description of this specific operation

        Returns:
            Context manager that catches and stores errors
        """
        return self._OperationContext(self, sub_operation)

    def to_error(self) -> Optional[AggregateError]:
        """Build an AggregateError from the collected failures, or None."""
        if not self.has_errors:
            return None
        return AggregateError(self.operation, [error for _, error in self.errors])

    def raise_for_errors(self) -> None:
        """Raise an AggregateError if anything failed."""
        error = self.to_error()
        if error is not None:
            raise error

    def get_summary(self) -> str:
        """
        Get a summary of collected errors.

        Returns:
            Multi-line summary string
        """
        if not self.has_errors:
            return f"All operations completed successfully ({self.success_count} total)"

        summary = f"Failed {self.error_count} of {self.error_count + self.success_count} operations:\n"
        for sub_op, error in self.errors:
            if isinstance(error, MonomeGridError):
                summary += f"  - {sub_op}: {error.user_message}\n"
            else:
                summary += f"  - {sub_op}: {error}\n"

        return summary.rstrip()

    class _OperationContext:
        """Internal context manager for individual operations."""

        def __init__(self, collector: "ErrorCollector", sub_operation: str):
            self.collector = collector
            self.sub_operation = sub_operation

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is None:
                self.collector.success_count += 1
                return False

            if not issubclass(exc_type, Exception):
                return False

            self.collector.errors.append((self.sub_operation, exc_val))
            logger.debug(f"{self.collector.operation}: {self.sub_operation} failed: {exc_val}")
            return True
