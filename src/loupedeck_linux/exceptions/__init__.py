"""
Custom exception hierarchy for loupedeck-linux.

## Exception Hierarchy

```
LoupedeckError (base)
├── ConfigurationError
│   ├── ConfigFileInvalidError
│   ├── ConfigValidationError
│   ├── GeometryError
│   └── PageNotFoundError
├── DeviceError
│   ├── DeviceNotConnectedError
│   └── DisplayTimeoutError
└── SystemControlError
```

All exceptions carry `user_message`, `technical_message`, `recoverable`
and `recovery_hint`. See `loupedeck_linux.exceptions.handlers` for the
helpers that translate low-level errors into these types.

### Example: Invalid page document

```python
from loupedeck_linux.exceptions import wrap_pydantic_error

try:
    config = PagesConfig.model_validate_json(path.read_text())
except ValidationError as e:
    raise wrap_pydantic_error(e, str(path)) from e
```
"""

from .base import LoupedeckError
from .config import (
    ConfigFileInvalidError,
    ConfigurationError,
    ConfigValidationError,
    GeometryError,
    PageNotFoundError,
)
from .device import (
    DeviceError,
    DeviceNotConnectedError,
    DisplayTimeoutError,
    SystemControlError,
)
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    validation_issues,
    wrap_pydantic_error,
)

__all__ = [
    # Base
    "LoupedeckError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "GeometryError",
    "PageNotFoundError",
    # Device
    "DeviceError",
    "DeviceNotConnectedError",
    "DisplayTimeoutError",
    "SystemControlError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "collect_errors",
    "format_error_for_display",
    "validation_issues",
    "wrap_pydantic_error",
]
