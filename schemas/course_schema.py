from typing import Any, List, Optional, Union
from pydantic import BaseModel


class CourseCreate(BaseModel):
    teacherId: Optional[str] = None
    teacherName: Optional[str] = None


class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    price: Optional[Union[str, int, float]] = None
    level: Optional[str] = None
    status: Optional[str] = None
    # The course editor posts sections as a JSON string from multipart forms
    sections: Optional[Union[str, List[dict]]] = None


class VideoUploadRequest(BaseModel):
    fileName: Optional[str] = None
    fileType: Optional[str] = None


# Response Models
class CourseResponse(BaseModel):
    message: str
    data: dict


class CoursesResponse(BaseModel):
    message: str
    data: List[dict]


class UploadUrlResponse(BaseModel):
    message: str
    data: Any
