"""
Print Duplicate Applicant Groups

Runs the duplicate finder against the configured database and prints each
group with its members' child-record counts.
"""
import argparse
import json
import sys
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.caseflow.db.session import get_db_session
from src.caseflow.pipelines.deduplication import DuplicateFinder
from src.caseflow.services.errors import DuplicateFetchError
from src.caseflow.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="List likely duplicate applicants")
    parser.add_argument("--json", action="store_true", help="Emit groups as JSON")
    args = parser.parse_args()

    setup_logging()

    try:
        with get_db_session() as session:
            groups = DuplicateFinder(session).find_duplicates()
    except DuplicateFetchError as e:
        logger.error("find_duplicates_failed", error=str(e))
        print(f"{e}. Please try again.", file=sys.stderr)
        return 1

    if args.json:
        payload = [
            {
                "matchType": group.match_type,
                "matchValue": group.match_value,
                "applications": group.applications,
            }
            for group in groups
        ]
        print(json.dumps(payload, indent=2, default=str))
        return 0

    if not groups:
        print("No duplicate applicants found.")
        return 0

    for group in groups:
        print(f"[{group.match_type}] {group.match_value}")
        for app in group.applications:
            print(
                f"  {app['id']}  {app['full_name']:<30} {app['status']:<12} "
                f"created {app['created_at']:%Y-%m-%d}  "
                f"visits={app['visit_count']} notes={app['event_count']} docs={app['document_count']}"
            )
        print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
