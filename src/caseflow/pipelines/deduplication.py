"""
Duplicate Detection Pipeline

Groups open applicants that share a normalized name or property address
so a reviewer can decide which records to merge.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.caseflow.db.repository import (
    ApplicantRepository,
    ApplicationDocumentRepository,
    CaseEventRepository,
    ChildRecordRepository,
    FieldVisitRepository,
)
from src.caseflow.services.errors import DuplicateFetchError
from src.caseflow.transformers.record_normalizer import RecordNormalizer
from src.caseflow.utils.logger import get_logger

logger = get_logger(__name__)

MATCH_NAME = "name"
MATCH_ADDRESS = "address"

# Stored applicant fields carried into each group member
APPLICANT_FIELDS = (
    "id",
    "full_name",
    "property_address",
    "property_city",
    "property_county",
    "property_zip",
    "phone_number",
    "email",
    "status",
    "created_at",
    "assigned_to",
    "comments",
)


@dataclass
class DuplicateGroup:
    """
    Applicants sharing one normalized name or address.

    Attributes:
        match_type: "name" or "address"
        match_value: The first member's value as entered
        applications: Members with child-record counts, newest first
    """
    match_type: str
    match_value: str
    applications: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def applicant_ids(self) -> List[str]:
        return [app["id"] for app in self.applications]


def _newest_first(members: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(members, key=lambda app: app["created_at"], reverse=True)


def group_duplicates(
    applicants: Iterable[Dict[str, Any]],
    normalizer: Optional[RecordNormalizer] = None,
) -> List[DuplicateGroup]:
    """
    Group applicant snapshots by normalized name, then by normalized address.

    Name groups come first. An address group whose member set equals a group
    already emitted is dropped; groups that merely overlap are both kept.
    Applicants with an empty name or address are not grouped on that field.

    Args:
        applicants: Applicant dicts, newest first
        normalizer: Key builder (default RecordNormalizer)

    Returns:
        Duplicate groups in emission order
    """
    normalizer = normalizer or RecordNormalizer()

    name_groups: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    address_groups: Dict[str, List[Dict[str, Any]]] = defaultdict(list)

    for app in applicants:
        name_key = normalizer.normalize_name(app.get("full_name"))
        if name_key:
            name_groups[name_key].append(app)

        address_key = normalizer.normalize_address(app.get("property_address"))
        if address_key:
            address_groups[address_key].append(app)

    groups: List[DuplicateGroup] = []
    emitted_keys = set()

    for members in name_groups.values():
        if len(members) < 2:
            continue
        members = _newest_first(members)
        emitted_keys.add(normalizer.group_key(app["id"] for app in members))
        groups.append(DuplicateGroup(
            match_type=MATCH_NAME,
            match_value=members[0]["full_name"],
            applications=members,
        ))

    for members in address_groups.values():
        if len(members) < 2:
            continue
        key = normalizer.group_key(app["id"] for app in members)
        if key in emitted_keys:
            continue
        emitted_keys.add(key)
        members = _newest_first(members)
        groups.append(DuplicateGroup(
            match_type=MATCH_ADDRESS,
            match_value=members[0]["property_address"],
            applications=members,
        ))

    return groups


class DuplicateFinder:
    """
    Finds likely duplicate applicants among open (non-closed) cases.

    Every call reads a fresh snapshot; nothing is cached, so results always
    reflect the latest merges and status changes.
    """

    def __init__(self, session: Session):
        self.session = session
        self.normalizer = RecordNormalizer()
        self.applicants = ApplicantRepository()
        self.visits = FieldVisitRepository()
        self.events = CaseEventRepository()
        self.documents = ApplicationDocumentRepository()

    def find_duplicates(self) -> List[DuplicateGroup]:
        """
        Build duplicate groups over all open applicants.

        Returns:
            Name groups followed by address groups; [] when nothing matches

        Raises:
            DuplicateFetchError: If the applicant set cannot be read
        """
        try:
            applicants = self.applicants.get_open_applicants(self.session)
        except SQLAlchemyError as e:
            logger.error("duplicate_applicant_fetch_failed", error=str(e), error_type=type(e).__name__)
            raise DuplicateFetchError("Failed to fetch applicants") from e

        if not applicants:
            logger.info("duplicates_found", applicants=0, name_groups=0, address_groups=0)
            return []

        # Detach plain values before any count query can roll the session back
        rows = [{name: getattr(a, name) for name in APPLICANT_FIELDS} for a in applicants]
        applicant_ids = [row["id"] for row in rows]

        visit_counts = self._fetch_counts(self.visits, applicant_ids)
        event_counts = self._fetch_counts(self.events, applicant_ids)
        document_counts = self._fetch_counts(self.documents, applicant_ids)

        for row in rows:
            row["visit_count"] = visit_counts.get(row["id"], 0)
            row["event_count"] = event_counts.get(row["id"], 0)
            row["document_count"] = document_counts.get(row["id"], 0)

        groups = group_duplicates(rows, self.normalizer)

        logger.info(
            "duplicates_found",
            applicants=len(rows),
            name_groups=sum(1 for g in groups if g.match_type == MATCH_NAME),
            address_groups=sum(1 for g in groups if g.match_type == MATCH_ADDRESS),
        )
        return groups

    def _fetch_counts(self, repository: ChildRecordRepository, applicant_ids: List[str]) -> Dict[str, int]:
        """Counts are display hints only: a failed lookup degrades to zero."""
        try:
            return repository.count_by_applicant(self.session, applicant_ids)
        except SQLAlchemyError as e:
            logger.warning(
                "duplicate_counts_unavailable",
                model=repository.model.__name__,
                error=str(e),
                error_type=type(e).__name__
            )
            self.session.rollback()
            return {}
