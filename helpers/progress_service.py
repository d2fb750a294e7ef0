import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from config import settings
from helpers.exceptions import ProgressConflictError, ProgressNotFoundError, ProgressStorageError
from helpers.progress_helper import build_initial_sections, calculate_overall_progress, merge_sections

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_progress(store, user_id: str, course_id: str) -> Dict[str, Any]:
    progress = store.get(user_id, course_id)
    if progress is None:
        raise ProgressNotFoundError(user_id, course_id)
    return progress


def create_initial_progress(store, user_id: str, course_id: str, course_sections: List[Dict[str, Any]],
                            now: Optional[str] = None) -> Dict[str, Any]:
    """Create the progress record for a fresh enrollment, every chapter incomplete."""
    now = now or utc_now_iso()
    record = {
        'userId': user_id,
        'courseId': course_id,
        'enrollmentDate': now,
        'overallProgress': 0.0,
        'sections': build_initial_sections(course_sections),
        'lastAccessedTimestamp': now,
    }
    return store.put(record, expected_version=None)


def apply_progress_update(
    store,
    user_id: str,
    course_id: str,
    sections: List[Dict[str, Any]],
    max_attempts: Optional[int] = None,
    clock: Callable[[], str] = utc_now_iso,
) -> Dict[str, Any]:
    """
    Merge ``sections`` into the stored progress for (user_id, course_id) and
    persist the result.

    Each attempt loads the current record, merges, recomputes
    ``overallProgress`` from the merged sections and writes conditionally on
    the loaded version. A conflicting write restarts the whole cycle.

    Raises:
        InvalidProgressError: malformed sections; nothing is written.
        ProgressStorageError: storage failed or every attempt conflicted.
    """
    max_attempts = max_attempts or settings.PROGRESS_UPDATE_MAX_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        existing = store.get(user_id, course_id)
        now = clock()

        if existing is None:
            merged_sections = merge_sections([], sections)
            record = {
                'userId': user_id,
                'courseId': course_id,
                'enrollmentDate': now,
                'sections': merged_sections,
                'overallProgress': calculate_overall_progress(merged_sections),
                'lastAccessedTimestamp': now,
            }
            expected_version = None
        else:
            merged_sections = merge_sections(existing.get('sections') or [], sections)
            record = {
                **existing,
                'sections': merged_sections,
                'overallProgress': calculate_overall_progress(merged_sections),
                'lastAccessedTimestamp': now,
            }
            expected_version = int(existing.get('version', 0))

        try:
            saved = store.put(record, expected_version=expected_version)
        except ProgressConflictError:
            logger.info(
                f"Progress for {user_id}/{course_id} changed during update "
                f"(attempt {attempt}/{max_attempts}), retrying"
            )
            continue

        logger.info(
            f"Updated progress for {user_id}/{course_id}: "
            f"overallProgress={saved['overallProgress']:.3f}"
        )
        return saved

    raise ProgressStorageError(
        f"Could not update course progress for {user_id}/{course_id} after {max_attempts} attempts"
    )
