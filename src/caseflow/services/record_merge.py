"""
Applicant record merge.

Folds a duplicate applicant into a master applicant: every child record
moves to the master, comments are combined, and the duplicate is deleted.
All of it happens in one transaction.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.caseflow.db.models import Applicant
from src.caseflow.db.repository import (
    ApplicantRepository,
    ApplicationDocumentRepository,
    CaseEventRepository,
    ClientRepository,
    FieldVisitRepository,
)
from src.caseflow.services.errors import (
    ApplicantNotFoundError,
    MergeReassignmentError,
    MergeValidationError,
)
from src.caseflow.utils.logger import get_logger

logger = get_logger(__name__)

MERGED_COMMENTS_SEPARATOR = "\n\n--- Merged from duplicate record ---\n"


@dataclass
class MergeResult:
    master: Applicant
    duplicate_id: str
    visits_moved: int = 0
    events_moved: int = 0
    documents_moved: int = 0
    client_moved: bool = False


def merge_comments(master_comments: Optional[str], duplicate_comments: Optional[str]) -> Optional[str]:
    """
    Append the duplicate's comments to the master's under a separator line.

    >>> merge_comments("Called twice", "Prefers text")
    'Called twice\\n\\n--- Merged from duplicate record ---\\nPrefers text'
    """
    if not duplicate_comments:
        return master_comments
    if not master_comments:
        return duplicate_comments
    return master_comments + MERGED_COMMENTS_SEPARATOR + duplicate_comments


class RecordMergeService:
    """
    Merges a duplicate applicant into a master applicant.

    Both applicant rows are locked for the duration of the merge, so
    concurrent merges touching either id run one after the other. Any
    failure rolls the whole merge back and leaves the duplicate intact.
    """

    def __init__(self, session: Session):
        self.session = session
        self.applicants = ApplicantRepository()
        self.visits = FieldVisitRepository()
        self.events = CaseEventRepository()
        self.documents = ApplicationDocumentRepository()
        self.clients = ClientRepository()

    def merge(self, master_id: Optional[str], duplicate_id: Optional[str]) -> MergeResult:
        """
        Merge duplicate_id into master_id and commit.

        Args:
            master_id: Applicant that survives
            duplicate_id: Applicant that is absorbed and deleted

        Returns:
            MergeResult with the refreshed master and per-kind move counts

        Raises:
            MergeValidationError: Missing ids or master == duplicate
            ApplicantNotFoundError: Either applicant does not exist
            MergeReassignmentError: A step failed; nothing was changed
        """
        master_id, duplicate_id = self._validate(master_id, duplicate_id)

        logger.info("merge_started", master_id=master_id, duplicate_id=duplicate_id)

        try:
            locked = self.applicants.lock_for_merge(self.session, [master_id, duplicate_id])
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("merge_lock_failed", master_id=master_id, duplicate_id=duplicate_id, error=str(e))
            raise MergeReassignmentError("applicant records", e) from e

        master = locked.get(master_id)
        duplicate = locked.get(duplicate_id)
        if master is None:
            self.session.rollback()
            raise ApplicantNotFoundError("master", master_id)
        if duplicate is None:
            self.session.rollback()
            raise ApplicantNotFoundError("duplicate", duplicate_id)

        result = MergeResult(master=master, duplicate_id=duplicate_id)
        step = "field visits"
        try:
            result.visits_moved = self.visits.reassign(self.session, duplicate_id, master_id)

            step = "case events"
            result.events_moved = self.events.reassign(self.session, duplicate_id, master_id)

            step = "documents"
            result.documents_moved = self.documents.reassign(self.session, duplicate_id, master_id)

            step = "comments"
            combined = merge_comments(master.comments, duplicate.comments)
            if combined != master.comments:
                master.comments = combined
                self.session.flush()

            step = "client record"
            result.client_moved = self._merge_client(master_id, duplicate_id)

            step = "duplicate record"
            self.applicants.delete(self.session, duplicate_id)

            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(
                "merge_step_failed",
                step=step,
                master_id=master_id,
                duplicate_id=duplicate_id,
                error=str(e),
                error_type=type(e).__name__
            )
            raise MergeReassignmentError(step, e) from e

        self.session.refresh(master)
        logger.info(
            "merge_completed",
            master_id=master_id,
            duplicate_id=duplicate_id,
            visits_moved=result.visits_moved,
            events_moved=result.events_moved,
            documents_moved=result.documents_moved,
            client_moved=result.client_moved,
        )
        return result

    @staticmethod
    def _validate(master_id: Optional[str], duplicate_id: Optional[str]) -> Tuple[str, str]:
        master_id = (master_id or "").strip()
        duplicate_id = (duplicate_id or "").strip()

        if not master_id:
            raise MergeValidationError("masterId is required")
        if not duplicate_id:
            raise MergeValidationError("duplicateId is required")
        if master_id == duplicate_id:
            raise MergeValidationError("Cannot merge an application with itself")
        return master_id, duplicate_id

    def _merge_client(self, master_id: str, duplicate_id: str) -> bool:
        """
        Carry the duplicate's client enrollment over when the master has none.

        When both are enrolled the master's enrollment wins and the
        duplicate's is removed along with the duplicate.

        Returns:
            True if the duplicate's client record moved to the master
        """
        duplicate_client = self.clients.get_by_applicant(self.session, duplicate_id)
        if duplicate_client is None:
            return False

        if self.clients.get_by_applicant(self.session, master_id) is None:
            self.clients.reassign(self.session, duplicate_id, master_id)
            return True

        self.clients.delete(self.session, duplicate_client.id)
        return False
