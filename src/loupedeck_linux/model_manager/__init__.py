"""Model persistence and observer plumbing shared by the services.

- **PydanticPersistence**: load/save pydantic models as JSON with backups
- **ObserverManager**: thread-safe observer list with error isolation
"""

from loupedeck_linux.model_manager.observer import ObserverManager
from loupedeck_linux.model_manager.persistence import PydanticPersistence

__all__ = ["ObserverManager", "PydanticPersistence"]
