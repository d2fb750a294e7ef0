from fastapi import APIRouter, Depends, HTTPException
import logging
import time

from config.db_config import get_dynamodb_resource, get_progress_table
from config import settings
from helpers.dynamodb_helper import convert_from_dynamodb_type
from helpers.exceptions import InvalidProgressError, ProgressNotFoundError, ProgressStorageError
from helpers.progress_service import apply_progress_update, get_progress
from helpers.progress_store import ProgressStore
from middleware.auth_middleware import get_current_user
from schemas.progress_schema import EnrolledCoursesResponse, ProgressResponse, ProgressUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["User Course Progress"])

BATCH_GET_MAX_ATTEMPTS = 5
BATCH_GET_BACKOFF_SECONDS = 0.05


def get_progress_store(table=Depends(get_progress_table)) -> ProgressStore:
    return ProgressStore(table)


def batch_get_courses(resource, course_ids) -> list:
    """Fetch courses by id, 100 keys per BatchGetItem call."""
    table_name = settings.COURSES_TABLE
    courses = []
    for start in range(0, len(course_ids), 100):
        request = {table_name: {'Keys': [{'courseId': cid} for cid in course_ids[start:start + 100]]}}
        for attempt in range(BATCH_GET_MAX_ATTEMPTS):
            if attempt:
                # Throttled keys come back unprocessed; back off before asking again
                time.sleep(BATCH_GET_BACKOFF_SECONDS * 2 ** (attempt - 1))
            response = resource.batch_get_item(RequestItems=request)
            courses.extend(response.get('Responses', {}).get(table_name, []))
            request = response.get('UnprocessedKeys')
            if not request:
                break
        else:
            raise ProgressStorageError(f"Courses still unprocessed after {BATCH_GET_MAX_ATTEMPTS} attempts")
    return convert_from_dynamodb_type(courses)


@router.get("/{user_id}/enrolled-courses", response_model=EnrolledCoursesResponse)
def get_user_enrolled_courses(user_id: str, store: ProgressStore = Depends(get_progress_store),
                              dynamodb=Depends(get_dynamodb_resource), user=Depends(get_current_user)):
    if user['userId'] != user_id:
        raise HTTPException(status_code=403, detail="Access denied")

    try:
        enrolled = store.list_for_user(user_id)
        course_ids = [item['courseId'] for item in enrolled]
        courses = batch_get_courses(dynamodb, course_ids) if course_ids else []
        return {"message": "Enrolled courses retrieved successfully", "data": courses}
    except Exception as e:
        logger.error(f"Error retrieving enrolled courses for {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error retrieving enrolled courses: {str(e)}")


@router.get("/{user_id}/courses/{course_id}", response_model=ProgressResponse)
def get_user_course_progress(user_id: str, course_id: str, store: ProgressStore = Depends(get_progress_store),
                             user=Depends(get_current_user)):
    if user['userId'] != user_id:
        raise HTTPException(status_code=403, detail="Access denied")

    try:
        progress = get_progress(store, user_id, course_id)
        return {"message": "Course progress retrieved successfully", "data": progress}
    except ProgressNotFoundError:
        raise HTTPException(status_code=404, detail="Course progress not found for this user")
    except ProgressStorageError as e:
        raise HTTPException(status_code=503, detail=f"Error retrieving user course progress: {str(e)}")


@router.put("/{user_id}/courses/{course_id}", response_model=ProgressResponse)
def update_user_course_progress(user_id: str, course_id: str, progress_data: ProgressUpdate,
                                store: ProgressStore = Depends(get_progress_store), user=Depends(get_current_user)):
    if user['userId'] != user_id:
        raise HTTPException(status_code=403, detail="Access denied")

    sections = [section.model_dump() for section in progress_data.sections]

    try:
        progress = apply_progress_update(
            store, user_id, course_id, sections,
            max_attempts=settings.PROGRESS_UPDATE_MAX_ATTEMPTS,
        )
        return {"message": "Course progress updated successfully", "data": progress}
    except InvalidProgressError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProgressStorageError as e:
        logger.error(f"Error updating progress for {user_id}/{course_id}: {str(e)}")
        raise HTTPException(status_code=503, detail=f"Error updating user course progress: {str(e)}")
