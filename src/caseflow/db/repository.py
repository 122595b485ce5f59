"""
Repository Pattern for Data Access

Provides CRUD operations and domain-specific queries for all models.
"""
from typing import List, Optional, Dict, Any, Iterable, Type, TypeVar

from sqlalchemy import Select, select, update, delete, func, or_
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import InstrumentedAttribute

from src.caseflow.db.models import (
    Applicant,
    ApplicantStatus,
    FieldVisit,
    CaseEvent,
    ApplicationDocument,
    Client,
)
from src.caseflow.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


class BaseRepository:
    """
    Base repository with common CRUD operations.

    Generic repository that can be extended for specific models.
    """

    def __init__(self, model: Type[T]):
        """
        Initialize repository with model class.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    def get_by_id(self, session: Session, id_value: Any) -> Optional[T]:
        """
        Get single record by primary key.

        Args:
            session: Database session
            id_value: Primary key value

        Returns:
            Model instance or None
        """
        result = session.get(self.model, id_value)
        logger.debug(
            "repository_get_by_id",
            model=self.model.__name__,
            id=id_value,
            found=result is not None
        )
        return result

    def create(self, session: Session, **kwargs) -> T:
        """
        Create new record.

        Args:
            session: Database session
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        session.add(instance)
        session.flush()
        logger.info("repository_created", model=self.model.__name__, id=getattr(instance, 'id', None))
        return instance

    def delete(self, session: Session, id_value: Any) -> bool:
        """
        Hard delete by primary key with a single DELETE statement.

        Issued directly against the table so no ORM relationship cascade
        can remove rows behind the caller's back.

        Args:
            session: Database session
            id_value: Primary key value

        Returns:
            True if a row was deleted, False if not found
        """
        result = session.execute(
            delete(self.model)
            .where(self.model.id == id_value)
            .execution_options(synchronize_session="fetch")
        )
        session.flush()
        deleted = result.rowcount > 0
        if deleted:
            logger.info("repository_deleted", model=self.model.__name__, id=id_value)
        else:
            logger.warning("repository_delete_not_found", model=self.model.__name__, id=id_value)
        return deleted


class ApplicantRepository(BaseRepository):
    """Repository for Applicant model with case-management queries."""

    def __init__(self):
        super().__init__(Applicant)

    def get_open_applicants(self, session: Session) -> List[Applicant]:
        """
        Get every applicant whose status is not closed, newest first.

        Args:
            session: Database session

        Returns:
            List of applicants ordered by created_at descending, then id
        """
        query = (
            select(Applicant)
            .where(Applicant.status != ApplicantStatus.CLOSED)
            .order_by(Applicant.created_at.desc(), Applicant.id)
        )
        return list(session.execute(query).scalars().all())

    def search(self, session: Session, term: str, limit: int = 20) -> List[Applicant]:
        """
        Case-insensitive substring search across name, address, phone and email.

        Args:
            session: Database session
            term: Search text (matched literally, wildcards escaped)
            limit: Maximum number of records

        Returns:
            Matching applicants, newest first
        """
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        query = (
            select(Applicant)
            .where(
                or_(
                    Applicant.full_name.ilike(pattern, escape="\\"),
                    Applicant.property_address.ilike(pattern, escape="\\"),
                    Applicant.phone_number.ilike(pattern, escape="\\"),
                    Applicant.email.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Applicant.created_at.desc(), Applicant.id)
            .limit(limit)
        )
        results = list(session.execute(query).scalars().all())
        logger.debug("applicant_search", term_length=len(term), count=len(results))
        return results

    @staticmethod
    def merge_lock_query(applicant_ids: Iterable[str]) -> Select:
        """SELECT ... FOR UPDATE over the distinct ids, ordered by id."""
        return (
            select(Applicant)
            .where(Applicant.id.in_(sorted(set(applicant_ids))))
            .order_by(Applicant.id)
            .with_for_update()
        )

    def lock_for_merge(self, session: Session, applicant_ids: Iterable[str]) -> Dict[str, Applicant]:
        """
        Load applicants with a row lock held until the transaction ends.

        Rows are locked in id order so two merges over the same pair
        cannot deadlock. Backends without row locks (SQLite) ignore FOR UPDATE.

        Args:
            session: Database session
            applicant_ids: Applicant ids to lock

        Returns:
            Mapping of id -> locked applicant (missing ids are absent)
        """
        ids = set(applicant_ids)
        query = self.merge_lock_query(ids)
        locked = {a.id: a for a in session.execute(query).scalars().all()}
        logger.debug("applicants_locked", requested=len(ids), locked=len(locked))
        return locked


class ChildRecordRepository(BaseRepository):
    """
    Repository for records owned by a single applicant.

    Subclasses name the foreign-key column that points at applicants.
    """

    parent_column: str = "applicant_id"

    @property
    def parent_key(self) -> InstrumentedAttribute:
        return getattr(self.model, self.parent_column)

    def list_for_applicant(self, session: Session, applicant_id: str) -> List[Any]:
        query = select(self.model).where(self.parent_key == applicant_id)
        return list(session.execute(query).scalars().all())

    def count_by_applicant(self, session: Session, applicant_ids: Iterable[str]) -> Dict[str, int]:
        """
        Count child rows per applicant for exactly the given id set.

        Args:
            session: Database session
            applicant_ids: Applicant ids to count for

        Returns:
            Mapping of applicant id -> row count (ids without rows are absent)
        """
        ids = list(applicant_ids)
        if not ids:
            return {}

        query = (
            select(self.parent_key, func.count())
            .where(self.parent_key.in_(ids))
            .group_by(self.parent_key)
        )
        return {parent_id: count for parent_id, count in session.execute(query).all()}

    def reassign(self, session: Session, from_applicant_id: str, to_applicant_id: str) -> int:
        """
        Point every child row of one applicant at another.

        Only the foreign key changes; no rows are created or removed.

        Args:
            session: Database session
            from_applicant_id: Current owner
            to_applicant_id: New owner

        Returns:
            Number of rows reassigned
        """
        stmt = (
            update(self.model)
            .where(self.parent_key == from_applicant_id)
            .values({self.parent_column: to_applicant_id})
            .execution_options(synchronize_session="fetch")
        )
        result = session.execute(stmt)
        session.flush()
        logger.info(
            "child_records_reassigned",
            model=self.model.__name__,
            from_applicant_id=from_applicant_id,
            to_applicant_id=to_applicant_id,
            count=result.rowcount
        )
        return result.rowcount


class FieldVisitRepository(ChildRecordRepository):
    """Repository for FieldVisit model."""

    def __init__(self):
        super().__init__(FieldVisit)

    def list_for_applicant(self, session: Session, applicant_id: str) -> List[FieldVisit]:
        """Visits for one applicant, most recent visit first."""
        query = (
            select(FieldVisit)
            .where(FieldVisit.applicant_id == applicant_id)
            .order_by(FieldVisit.visit_date.desc(), FieldVisit.created_at.desc())
        )
        return list(session.execute(query).scalars().all())


class CaseEventRepository(ChildRecordRepository):
    """Repository for CaseEvent model."""

    def __init__(self):
        super().__init__(CaseEvent)


class ApplicationDocumentRepository(ChildRecordRepository):
    """Repository for ApplicationDocument model (keyed by application_id)."""

    parent_column = "application_id"

    def __init__(self):
        super().__init__(ApplicationDocument)


class ClientRepository(ChildRecordRepository):
    """Repository for Client model (at most one per applicant)."""

    def __init__(self):
        super().__init__(Client)

    def get_by_applicant(self, session: Session, applicant_id: str) -> Optional[Client]:
        query = select(Client).where(Client.applicant_id == applicant_id)
        return session.execute(query).scalars().first()
