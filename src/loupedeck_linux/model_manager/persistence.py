"""Loading and saving pydantic models as JSON files.

Used for both documents the application owns: the page layout
(``config.json``, also written by the HTTP API) and the settings
(``settings.json``).

Safety rules:
    - The previous file is copied to ``<name>.bak`` before it is overwritten
    - Writes go to ``<name>.tmp`` first and are renamed into place
    - A file that exists but fails to parse is never overwritten with defaults
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from loupedeck_linux.exceptions import (
    ConfigFileInvalidError,
    ConfigurationError,
    wrap_pydantic_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class PydanticPersistence:
    """Stateless helpers for pydantic JSON persistence."""

    @staticmethod
    def load_json(path: Path, model_type: type[T]) -> T:
        """
        Load and validate a model from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the file is empty or not valid JSON
            ConfigValidationError: If the JSON content fails validation
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            json_content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigFileInvalidError(str(path), f"Cannot read file: {e}") from e

        if not json_content.strip():
            raise ConfigFileInvalidError(str(path), "File is empty")

        try:
            model = model_type.model_validate_json(json_content)
        except ValidationError as e:
            logger.error(f"Validation error loading {model_type.__name__} from {path}: {e}")
            raise wrap_pydantic_error(e, str(path)) from e

        logger.debug(f"Loaded {model_type.__name__} from {path}")
        return model

    @staticmethod
    def validate_data(data: Any, model_type: type[T], source: str | None = None) -> T:
        """
        Validate already-parsed data (e.g. a request body) into a model.

        Raises:
            ConfigValidationError: With one ``issues`` entry per problem
        """
        try:
            return model_type.model_validate(data)
        except ValidationError as e:
            raise wrap_pydantic_error(e, source) from e

    @staticmethod
    def save_json(
        data: BaseModel,
        path: Path,
        indent: int = 2,
        backup: bool = True,
    ) -> None:
        """
        Save a model with a ``.bak`` backup and an atomic rename.

        Raises:
            OSError: If the file cannot be written
            ConfigurationError: If serialization fails
        """
        try:
            json_content = data.model_dump_json(indent=indent, by_alias=True)
        except Exception as e:
            logger.error(f"Failed to serialize {type(data).__name__}: {e}")
            raise ConfigurationError(
                user_message=f"Failed to save configuration to {path}",
                technical_message=f"Failed to serialize {type(data).__name__}: {e}",
            ) from e

        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            if backup and path.exists():
                backup_path = path.with_suffix(path.suffix + ".bak")
                shutil.copy2(path, backup_path)
                logger.debug(f"Created backup: {backup_path}")

            temp_path = path.with_suffix(path.suffix + ".tmp")
            try:
                temp_path.write_text(json_content + "\n", encoding="utf-8")
                temp_path.replace(path)
            finally:
                if temp_path.exists():
                    temp_path.unlink()
        except OSError as e:
            logger.error(f"OS error saving {type(data).__name__} to {path}: {e}")
            raise

        logger.debug(f"Saved {type(data).__name__} to {path}")

    @staticmethod
    def load_json_or_default(
        path: Path, model_type: type[T], default_factory: Callable[[], T] | None = None
    ) -> T:
        """
        Load a model, or build the default when the file does not exist.

        Parse and validation errors still propagate. Nothing is written.
        """
        try:
            return PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            logger.info(f"File not found: {path}, using default {model_type.__name__}")
            return default_factory() if default_factory else model_type()

    @staticmethod
    def ensure_valid_or_create(
        path: Path,
        model_type: type[T],
        default_factory: Callable[[], T] | None = None,
        auto_save: bool = True,
    ) -> T:
        """
        Load a model, writing the default to disk on first run.

        A missing file is created from the default. A corrupted file is left
        untouched for manual recovery and the default is returned instead.
        """
        try:
            return PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            logger.info(f"File not found: {path}, creating default {model_type.__name__}")
            instance = default_factory() if default_factory else model_type()
            if auto_save:
                PydanticPersistence.save_json(instance, path, backup=False)
                logger.info(f"Saved default {model_type.__name__} to {path}")
            return instance
        except ConfigurationError as e:
            logger.error(f"Failed to load {path}: {e.user_message}")
            logger.warning(
                f"Using default {model_type.__name__} "
                f"(existing file NOT overwritten - manual recovery may be possible)"
            )
            return default_factory() if default_factory else model_type()

    @staticmethod
    def validate_json(path: Path, model_type: type[T]) -> tuple[bool, str | None]:
        """
        Check a JSON file against a model.

        Returns:
            ``(True, None)`` when valid, otherwise ``(False, reason)``
        """
        try:
            PydanticPersistence.load_json(path, model_type)
            return True, None
        except FileNotFoundError:
            return False, f"File not found: {path}"
        except ConfigurationError as e:
            return False, e.get_full_message()
