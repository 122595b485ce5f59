"""
Merge Two Applicant Records

Moves every visit, case event and document from the duplicate applicant to
the master applicant and deletes the duplicate.
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.caseflow.db.session import SessionLocal
from src.caseflow.services.errors import CaseflowError
from src.caseflow.services.record_merge import RecordMergeService
from src.caseflow.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Merge a duplicate applicant into a master applicant")
    parser.add_argument("master_id", help="Applicant that survives")
    parser.add_argument("duplicate_id", help="Applicant that is absorbed and deleted")
    args = parser.parse_args()

    setup_logging()

    session = SessionLocal()
    try:
        result = RecordMergeService(session).merge(args.master_id, args.duplicate_id)
    except CaseflowError as e:
        logger.error("merge_applicants_failed", error=str(e), error_type=type(e).__name__)
        print(f"Merge failed: {e}", file=sys.stderr)
        return 1
    finally:
        session.close()

    print(
        f"Merged {result.duplicate_id} into {result.master.id}: "
        f"{result.visits_moved} visits, {result.events_moved} case events, "
        f"{result.documents_moved} documents moved"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
