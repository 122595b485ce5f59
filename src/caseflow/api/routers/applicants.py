"""
Applicants Router

Endpoints for duplicate review, record merging, applicant search and
visit history.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from config.settings import Settings
from src.caseflow.api.auth import User, require_admin
from src.caseflow.api.dependencies import (
    get_db,
    get_duplicate_finder,
    get_merge_service,
    get_settings,
)
from src.caseflow.api.schemas import (
    ApplicantBase,
    ApplicantDetail,
    ApplicantSearchResults,
    ApplicantVisits,
    DuplicateGroup,
    DuplicateGroupList,
    ErrorResponse,
    FieldVisitInfo,
    MergeRequest,
    MergeResponse,
)
from src.caseflow.db.repository import ApplicantRepository, FieldVisitRepository
from src.caseflow.pipelines.deduplication import DuplicateFinder
from src.caseflow.services.errors import (
    ApplicantNotFoundError,
    DuplicateFetchError,
    MergeReassignmentError,
    MergeValidationError,
)
from src.caseflow.services.record_merge import RecordMergeService
from src.caseflow.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/applicants", tags=["applicants"])


def _is_transient(error: Exception) -> bool:
    """Timeouts and dropped connections: nothing was committed, retry is safe."""
    return isinstance(error.__cause__, OperationalError)


@router.get(
    "/duplicates",
    response_model=DuplicateGroupList,
    responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def list_duplicates(
    finder: DuplicateFinder = Depends(get_duplicate_finder),
    current_user: User = Depends(require_admin),
):
    """
    List groups of open applicants that share a name or property address.

    Returns:
        Name-match groups followed by address-match groups
    """
    try:
        groups = finder.find_duplicates()
    except DuplicateFetchError as e:
        code = status.HTTP_503_SERVICE_UNAVAILABLE if _is_transient(e) else status.HTTP_500_INTERNAL_SERVER_ERROR
        raise HTTPException(status_code=code, detail=str(e))

    return DuplicateGroupList(
        data=[
            DuplicateGroup(
                match_type=group.match_type,
                match_value=group.match_value,
                applications=group.applications,
            )
            for group in groups
        ]
    )


@router.post(
    "/{master_id}/merge",
    response_model=MergeResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
def merge_applicants(
    master_id: str,
    body: MergeRequest,
    service: RecordMergeService = Depends(get_merge_service),
    current_user: User = Depends(require_admin),
):
    """
    Merge a duplicate applicant into the master applicant.

    Visits, case events and documents move to the master, comments are
    combined, and the duplicate is deleted. On failure nothing changes.

    Args:
        master_id: Applicant that survives
        body: {"duplicateId": ...}

    Raises:
        HTTPException: 400 bad input, 404 unknown applicant, 500/503 merge failure
    """
    logger.info("merge_requested", master_id=master_id, duplicate_id=body.duplicate_id, user_id=current_user.user_id)

    try:
        result = service.merge(master_id, body.duplicate_id)
    except MergeValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ApplicantNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except MergeReassignmentError as e:
        code = status.HTTP_503_SERVICE_UNAVAILABLE if _is_transient(e) else status.HTTP_500_INTERNAL_SERVER_ERROR
        raise HTTPException(status_code=code, detail=str(e))

    return MergeResponse(data=ApplicantDetail.model_validate(result.master))


@router.get("/search", response_model=ApplicantSearchResults)
def search_applicants(
    q: str = Query("", description="Name, address, phone or email fragment"),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
):
    """
    Search applicants by name, address, phone number or email.

    Queries shorter than the configured minimum return no results.
    """
    term = q.strip()
    if len(term) < app_settings.search_min_query_length:
        return ApplicantSearchResults(data=[])

    try:
        applicants = ApplicantRepository().search(db, term, limit=app_settings.search_result_limit)
    except SQLAlchemyError as e:
        logger.error("applicant_search_failed", error=str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to search applicants")

    return ApplicantSearchResults(data=[ApplicantBase.model_validate(a) for a in applicants])


@router.get("/{applicant_id}/visits", response_model=ApplicantVisits, responses={404: {"model": ErrorResponse}})
def get_applicant_visits(
    applicant_id: str,
    db: Session = Depends(get_db),
):
    """
    Get an applicant with its field visits, most recent first.

    Raises:
        HTTPException: 404 if applicant not found
    """
    applicant = ApplicantRepository().get_by_id(db, applicant_id)
    if not applicant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Applicant not found: {applicant_id}")

    visits = FieldVisitRepository().list_for_applicant(db, applicant_id)

    return ApplicantVisits(
        applicant=ApplicantDetail.model_validate(applicant),
        visits=[FieldVisitInfo.model_validate(v) for v in visits],
        visit_count=len(visits),
        attempt_count=sum(1 for v in visits if v.visit_outcome == "attempt"),
        engagement_count=sum(1 for v in visits if v.visit_outcome == "engagement"),
    )
