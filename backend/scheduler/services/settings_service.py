import json
import logging
from typing import Any, Dict, List, Optional

from scheduler.core.exceptions import RecordNotFoundError
from scheduler.core.validation import ValidationError
from scheduler.domain.interfaces import ISettingRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """System settings stored as name/value strings."""

    resource = "setting"

    def __init__(self, repo: ISettingRepository) -> None:
        self.repo = repo

    def get(self) -> List[Dict[str, Any]]:
        return [setting.to_dict() for setting in self.repo.get()]

    def find(self, name: str) -> Dict[str, Any]:
        setting = self.repo.find(name)
        if setting is None:
            raise RecordNotFoundError(self.resource, name)
        return setting.to_dict()

    def value(self, name: str, default: Optional[str] = None) -> Optional[str]:
        setting = self.repo.find(name)
        return setting.value if setting is not None else default

    def save(self, name: str, value: Any) -> Dict[str, Any]:
        """Store ``value`` under ``name``; lists and objects are kept as JSON."""
        if not name or not str(name).strip():
            raise ValidationError("The setting name cannot be empty.", "name")

        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        elif isinstance(value, bool):
            value = "1" if value else "0"
        elif value is not None:
            value = str(value)

        setting = self.repo.save(name, value)
        logger.info("Setting saved", extra={"context": {"setting": name}})
        return setting.to_dict()
