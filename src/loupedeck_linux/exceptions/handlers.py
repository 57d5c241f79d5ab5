"""
Centralized error handling utilities.

Errors are translated layer by layer:

```
CLI / API           shows error.user_message + error.recovery_hint
    ^ LoupedeckError
Services / layout   catch low-level exceptions, add context
    ^ Exception, OSError, pydantic.ValidationError
Device / subprocess raise standard Python exceptions
```

| Scenario | Use This |
|----------|----------|
| Pydantic rejected a config document | `wrap_pydantic_error(e, path)` |
| Build many things, report all failures | `collect_errors("build page 1")` |
| Step that must not stop the next one | `with ErrorContext("stop config API", re_raise=False): ...` |
| Show an error on the console | `format_error_for_display(e)` |
"""

import logging
from typing import Any, Optional

from .base import LoupedeckError
from .config import ConfigFileInvalidError, ConfigValidationError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Context manager that logs the start, completion or failure of an operation.

    Only ``Exception`` subclasses are handled; cancellation and
    KeyboardInterrupt always propagate.

    Example:
        ```python
        with ErrorContext("stop config API", logger, re_raise=False) as ctx:
            await api.stop()
        if ctx.error is None:
            ...
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
    ):
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[BaseException] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        if not isinstance(exc_val, Exception):
            return False

        self.error = exc_val

        if isinstance(exc_val, LoupedeckError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        return not self.re_raise


def validation_issues(error: Exception) -> list[dict[str, Any]]:
    """
    Flatten a pydantic ValidationError into JSON-friendly issue dicts.

    Returns:
        List of ``{"path": "pages.1.clock.position.col", "message": "..."}``
    """
    from pydantic import ValidationError

    if not isinstance(error, ValidationError):
        return [{"path": "", "message": str(error)}]

    return [
        {
            "path": ".".join(str(loc) for loc in err.get("loc", ())),
            "message": err.get("msg", "validation failed"),
        }
        for err in error.errors()
    ]


def wrap_pydantic_error(error: Exception, file_path: Optional[str] = None) -> LoupedeckError:
    """
    Convert a pydantic validation error to a configuration exception.

    Args:
        error: The pydantic ValidationError
        file_path: Path to the document that failed validation

    Returns:
        ConfigFileInvalidError for JSON syntax problems, otherwise
        ConfigValidationError carrying every issue
    """
    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg
        return ConfigFileInvalidError(file_path or "<request>", parse_error)

    issues = validation_issues(error)
    if len(issues) == 1:
        field = issues[0]["path"] or "unknown"
        reason = issues[0]["message"]
        value = None
        errors = getattr(error, "errors", None)
        if callable(errors):
            value = errors()[0].get("input")
        return ConfigValidationError(
            field=field, value=value, error_msg=reason, file_path=file_path, issues=issues
        )

    lines = [f"  - {issue['path']}: {issue['message']}" for issue in issues]
    return ConfigValidationError(
        field="multiple fields",
        value=None,
        error_msg=f"{len(issues)} validation errors:\n" + "\n".join(lines),
        file_path=file_path,
        issues=issues,
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, LoupedeckError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for batch operations.

    Example:
        ```python
        collector = collect_errors("build page 1")
        for name, cfg in page.components.items():
            with collector.try_operation(name):
                build(cfg)
        if collector.has_errors:
            logger.warning(collector.get_summary())
        ```
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """Collects errors so a batch can continue past individual failures."""

    def __init__(self, operation: str):
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def try_operation(self, sub_operation: str):
        """Context manager for a single operation within the batch."""
        return self._OperationContext(self, sub_operation)

    def get_summary(self) -> str:
        """Multi-line summary of collected errors."""
        if not self.has_errors:
            return f"{self.operation}: all {self.success_count} operations succeeded"

        total = self.error_count + self.success_count
        summary = f"{self.operation}: failed {self.error_count} of {total} operations:\n"
        for sub_op, error in self.errors:
            if isinstance(error, LoupedeckError):
                summary += f"  - {sub_op}: {error.user_message}\n"
            else:
                summary += f"  - {sub_op}: {error}\n"
        return summary.rstrip()

    class _OperationContext:
        def __init__(self, collector: "ErrorCollector", sub_operation: str):
            self.collector = collector
            self.sub_operation = sub_operation

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is None:
                self.collector.success_count += 1
                return False

            # Only ordinary exceptions are collected; cancellation propagates
            if not isinstance(exc_val, Exception):
                return False

            logger.debug(
                f"{self.collector.operation}: {self.sub_operation} failed: {exc_val}",
                exc_info=True,
            )
            self.collector.errors.append((self.sub_operation, exc_val))
            return True
