from typing import List, Optional
from pydantic import BaseModel


class ChapterProgress(BaseModel):
    chapterId: str
    completed: bool


class SectionProgress(BaseModel):
    sectionId: str
    chapters: List[ChapterProgress] = []


class UserCourseProgress(BaseModel):
    userId: str
    courseId: str
    enrollmentDate: str
    overallProgress: float
    sections: List[SectionProgress] = []
    lastAccessedTimestamp: str
    version: Optional[int] = None
