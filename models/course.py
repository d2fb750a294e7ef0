from typing import List, Optional
from pydantic import BaseModel


class Comment(BaseModel):
    commentId: str
    userId: str
    text: str
    timestamp: str


class Chapter(BaseModel):
    chapterId: str
    type: str  # "Text" | "Quiz" | "Video"
    title: str
    content: str
    comments: Optional[List[Comment]] = None
    video: Optional[str] = None


class Section(BaseModel):
    sectionId: str
    sectionTitle: str
    sectionDescription: Optional[str] = None
    chapters: List[Chapter] = []


class Enrollment(BaseModel):
    userId: str


class Course(BaseModel):
    courseId: str
    teacherId: str
    teacherName: str
    title: str
    description: Optional[str] = None
    category: str
    image: Optional[str] = None
    price: Optional[int] = None  # cents
    level: str  # "Beginner" | "Intermediate" | "Advanced"
    status: str  # "Draft" | "Published"
    sections: List[Section] = []
    enrollments: List[Enrollment] = []
