import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from scheduler.core.exceptions import RecordNotFoundError
from scheduler.core.validation import ValidationError
from scheduler.domain.interfaces import IRecordRepository
from scheduler.schemas import api_resources

logger = logging.getLogger(__name__)


class EntityService:
    """Application service shared by every entity ("model") of the scheduler.

    Records handed in and out are plain dicts keyed by internal field names;
    the repository works with domain entities. Subclasses provide
    ``validate()`` and, for the names in ``relations``, ``_attach()``.

    Business Rules:
    - ``save()`` validates first, then inserts when the record has no id and
      updates otherwise
    - ``find()``/``delete()`` raise RecordNotFoundError for unknown ids
    - ``attach()`` only accepts the relation names the entity supports
    """

    resource = "record"
    api_resource = ""
    relations: Tuple[str, ...] = ()

    def __init__(self, repo: IRecordRepository) -> None:
        self.repo = repo

    # ------------------------------------------------------------------
    # Model surface
    # ------------------------------------------------------------------

    def validate(self, data: Dict[str, Any]) -> Any:
        """Check ``data`` and return the domain entity built from it.

        Raises:
            ValidationError: when any rule is broken
        """
        raise NotImplementedError

    def save(self, data: Dict[str, Any]) -> int:
        """Validate and persist ``data``; returns the record id."""
        entity = self.validate(data)
        self._prepare(entity)

        if entity.id:
            record_id = self.repo.update(entity)
            action = "updated"
        else:
            record_id = self.repo.insert(entity)
            action = "created"

        logger.info(
            f"{self.resource.capitalize()} {action}",
            extra={"context": {"resource": self.resource, "record_id": record_id}},
        )
        return record_id

    def exists(self, record_id: int) -> bool:
        return self.repo.exists(record_id)

    def find(self, record_id: int) -> Dict[str, Any]:
        entity = self.repo.find(record_id)
        if entity is None:
            raise RecordNotFoundError(self.resource, record_id)
        return self._to_record(entity)

    def value(self, record_id: int, field: str) -> Any:
        """Return a single field of a record."""
        record = self.find(record_id)
        if field not in record:
            raise ValidationError(
                f"The requested field was not found in the {self.resource} data: {field}",
                field,
            )
        return record[field]

    def get(
        self,
        where: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[Dict[str, Any]]:
        entities = self.repo.get(
            where=where, limit=limit, offset=offset, order_by=order_by
        )
        return [self._to_record(entity) for entity in entities]

    def search(
        self,
        keyword: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[Dict[str, Any]]:
        entities = self.repo.search(
            keyword, limit=limit, offset=offset, order_by=order_by
        )
        return [self._to_record(entity) for entity in entities]

    def count(self, keyword: Optional[str] = None) -> int:
        return self.repo.count(keyword)

    def delete(self, record_id: int) -> None:
        if not self.repo.delete(record_id):
            raise RecordNotFoundError(self.resource, record_id)
        logger.info(
            f"{self.resource.capitalize()} deleted",
            extra={"context": {"resource": self.resource, "record_id": record_id}},
        )

    def check_relations(self, resources: Iterable[str]) -> None:
        for name in resources:
            if name not in self.relations:
                raise ValidationError(
                    f"The requested {self.resource} relation is not supported: {name}",
                    name,
                )

    def attach(self, record: Dict[str, Any], resources: Iterable[str]) -> Dict[str, Any]:
        """Replace relation references of an encoded record with full records."""
        self.check_relations(resources)
        for name in resources:
            self._attach(record, name)
        return record

    # ------------------------------------------------------------------
    # API encoding
    # ------------------------------------------------------------------

    def api_encode(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return api_resources.encode(self.api_resource, record)

    def api_decode(
        self, payload: Dict[str, Any], base: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return api_resources.decode(self.api_resource, payload, base)

    def api_decode_sort(
        self, sort: Sequence[Tuple[str, str]]
    ) -> List[Tuple[str, str]]:
        return api_resources.decode_sort(self.api_resource, sort)

    @staticmethod
    def only(record: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
        return api_resources.only(record, fields)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _to_record(self, entity: Any) -> Dict[str, Any]:
        return entity.to_dict()

    def _prepare(self, entity: Any) -> None:
        """Last changes to a validated entity before it is written."""

    def _attach(self, record: Dict[str, Any], name: str) -> None:
        raise NotImplementedError

    def _ensure_exists(self, record_id: Optional[int]) -> None:
        if record_id and not self.repo.exists(record_id):
            raise ValidationError(
                f"The provided {self.resource} ID does not exist in the database: {record_id}",
                "id",
            )
