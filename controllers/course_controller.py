from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import boto3
from boto3.dynamodb.conditions import Attr
import json
import logging
import uuid

from config import settings
from config.db_config import get_courses_table
from helpers.dynamodb_helper import convert_from_dynamodb_type, convert_to_dynamodb_type
from middleware.auth_middleware import get_current_user
from models.course import Course
from schemas.course_schema import CourseCreate, CourseUpdate, VideoUploadRequest, CourseResponse, CoursesResponse, UploadUrlResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Courses"])


def get_s3_client():
    return boto3.client('s3', region_name=settings.AWS_REGION)


def _load_course(table, course_id: str) -> dict:
    response = table.get_item(Key={'courseId': course_id})
    if 'Item' not in response:
        raise HTTPException(status_code=404, detail="Course not found")
    return convert_from_dynamodb_type(response['Item'])


def _with_ids(sections) -> list:
    """Give new sections and chapters from the editor their ids."""
    return [
        {
            **section,
            'sectionId': section.get('sectionId') or str(uuid.uuid4()),
            'chapters': [
                {**chapter, 'chapterId': chapter.get('chapterId') or str(uuid.uuid4())}
                for chapter in section.get('chapters') or []
            ],
        }
        for section in sections
    ]


@router.get("/", response_model=CoursesResponse)
def list_courses(category: Optional[str] = None, table=Depends(get_courses_table)):
    try:
        kwargs = {}
        if category and category != "all":
            kwargs['FilterExpression'] = Attr('category').eq(category)
        courses = []
        while True:
            response = table.scan(**kwargs)
            courses.extend(response.get('Items', []))
            if 'LastEvaluatedKey' not in response:
                break
            kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
        return {
            "message": "Courses retrieved successfully",
            "data": convert_from_dynamodb_type(courses)
        }
    except Exception as e:
        logger.error(f"Error retrieving courses: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error retrieving courses: {str(e)}")


@router.get("/{course_id}", response_model=CourseResponse)
def get_course(course_id: str, table=Depends(get_courses_table)):
    try:
        course = _load_course(table, course_id)
        return {"message": "Course retrieved successfully", "data": course}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving course {course_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error retrieving course: {str(e)}")


@router.post("/", response_model=CourseResponse)
def create_course(course: CourseCreate, table=Depends(get_courses_table), user=Depends(get_current_user)):
    if not course.teacherId or not course.teacherName:
        raise HTTPException(status_code=400, detail="Teacher Id and name are required")

    new_course = Course(
        courseId=str(uuid.uuid4()),
        teacherId=course.teacherId,
        teacherName=course.teacherName,
        title="Untitled Course",
        description="",
        category="Uncategorized",
        image="",
        price=0,
        level="Beginner",
        status="Draft",
        sections=[],
        enrollments=[],
    ).model_dump()

    try:
        table.put_item(Item=convert_to_dynamodb_type(new_course))
        return {"message": "Course created successfully", "data": new_course}
    except Exception as e:
        logger.error(f"Error creating course: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error creating course: {str(e)}")


@router.put("/{course_id}", response_model=CourseResponse)
def update_course(course_id: str, course_update: CourseUpdate, table=Depends(get_courses_table),
                  user=Depends(get_current_user)):
    update_data = course_update.model_dump(exclude_unset=True)

    try:
        course = _load_course(table, course_id)
        if course['teacherId'] != user['userId']:
            raise HTTPException(status_code=403, detail="Not authorized to update this course")

        if update_data.get('price'):
            try:
                update_data['price'] = int(float(update_data['price'])) * 100
            except (TypeError, ValueError):
                raise HTTPException(status_code=400, detail="Invalid price format: Price must be a valid number")

        if update_data.get('sections') is not None:
            sections = update_data['sections']
            if isinstance(sections, str):
                try:
                    sections = json.loads(sections)
                except json.JSONDecodeError:
                    raise HTTPException(status_code=400, detail="Invalid sections format")
            update_data['sections'] = _with_ids(sections)

        course.update(update_data)
        table.put_item(Item=convert_to_dynamodb_type(course))
        return {"message": "Course updated successfully", "data": course}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating course {course_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error updating course: {str(e)}")


@router.delete("/{course_id}", response_model=CourseResponse)
def delete_course(course_id: str, table=Depends(get_courses_table), user=Depends(get_current_user)):
    try:
        course = _load_course(table, course_id)
        if course['teacherId'] != user['userId']:
            raise HTTPException(status_code=403, detail="Not authorized to delete this course")

        table.delete_item(Key={'courseId': course_id})
        return {"message": "Course deleted successfully", "data": course}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting course {course_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error deleting course: {str(e)}")


@router.post(
    "/{course_id}/sections/{section_id}/chapters/{chapter_id}/get-upload-url",
    response_model=UploadUrlResponse,
)
def get_upload_video_url(course_id: str, section_id: str, chapter_id: str, request: VideoUploadRequest,
                         s3=Depends(get_s3_client), user=Depends(get_current_user)):
    if not request.fileName or not request.fileType:
        raise HTTPException(status_code=400, detail="File name and type are required")
    if not settings.S3_BUCKET_NAME:
        raise HTTPException(status_code=500, detail="S3 bucket name not configured")

    try:
        unique_id = str(uuid.uuid4())
        s3_key = f"videos/{unique_id}/{request.fileName}"

        presigned_url = s3.generate_presigned_url(
            'put_object',
            Params={
                'Bucket': settings.S3_BUCKET_NAME,
                'Key': s3_key,
                'ContentType': request.fileType
            },
            ExpiresIn=settings.UPLOAD_URL_EXPIRES_IN
        )

        video_url = f"{settings.CLOUDFRONT_DOMAIN}/videos/{unique_id}/{request.fileName}"

        return {
            "message": "Upload URL generated successfully",
            "data": {
                "uploadUrl": presigned_url,
                "videoUrl": video_url
            }
        }
    except Exception as e:
        logger.error(f"Error generating upload URL: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error generating upload URL: {str(e)}")
