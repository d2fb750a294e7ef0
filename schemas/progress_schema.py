from typing import List
from pydantic import BaseModel

from models.user_course_progress import SectionProgress, UserCourseProgress


class ProgressUpdate(BaseModel):
    sections: List[SectionProgress] = []


class ProgressResponse(BaseModel):
    message: str
    data: UserCourseProgress


class EnrolledCoursesResponse(BaseModel):
    message: str
    data: List[dict]
