"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

OrderBy = Sequence[Tuple[str, str]]


class IRecordReader(ABC):
    """Read operations shared by every entity repository."""

    @abstractmethod
    def exists(self, record_id: int) -> bool:
        """Return whether a record with this id exists."""
        pass

    @abstractmethod
    def find(self, record_id: int) -> Optional[Any]:
        """Get a record by ID."""
        pass

    @abstractmethod
    def get(
        self,
        where: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[OrderBy] = None,
    ) -> List[Any]:
        """Get records matching equality filters."""
        pass

    @abstractmethod
    def search(
        self,
        keyword: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[OrderBy] = None,
    ) -> List[Any]:
        """Get records whose text columns contain ``keyword``."""
        pass

    @abstractmethod
    def count(self, keyword: Optional[str] = None) -> int:
        """Count all records, or the ones ``search(keyword)`` would return."""
        pass


class IRecordWriter(ABC):
    """Write operations shared by every entity repository."""

    @abstractmethod
    def insert(self, entity: Any) -> int:
        """Insert a new record and return its id."""
        pass

    @abstractmethod
    def update(self, entity: Any) -> int:
        """Update an existing record and return its id."""
        pass

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        """Delete a record; False when it did not exist."""
        pass


class IRecordRepository(IRecordReader, IRecordWriter):
    """Complete repository interface combining read/write operations."""

    pass


class IUserRepository(IRecordRepository):
    """Role-scoped user repository."""

    @abstractmethod
    def get_role_id(self) -> int:
        pass

    @abstractmethod
    def email_in_use(self, email: str, exclude_id: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def username_in_use(self, username: str, exclude_id: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def get_related_ids(self, user_id: int, relation: str) -> List[int]:
        pass


class ISettingRepository(ABC):
    """Key/value settings storage."""

    @abstractmethod
    def get(self) -> List[Any]:
        pass

    @abstractmethod
    def find(self, name: str) -> Optional[Any]:
        pass

    @abstractmethod
    def save(self, name: str, value: Optional[str]) -> Any:
        pass
