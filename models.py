# /models.py
# Request bodies and stored record shapes. Records are persisted as plain dicts
# (camelCase keys, as the front-end pages expect them).
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from utils import new_id, now_iso

Number = Union[int, float]

UserStatus = Literal["pending", "approved", "rejected"]
USER_STATUSES = ("pending", "approved", "rejected")


# ----------------------------
# Stored records
# ----------------------------

class CourseProgress(BaseModel):
    name: str
    progress: Number = 0


class ProjectLogEntry(BaseModel):
    text: str
    time: str


class User(BaseModel):
    name: str
    email: str
    phone: str
    password: str
    role: str  # "student" or "teacher"
    courseType: Optional[str] = None
    status: UserStatus = "pending"
    createdAt: str = Field(default_factory=now_iso)
    courses: List[CourseProgress] = []
    projectLog: List[ProjectLogEntry] = []
    profile: Dict[str, Any] = {}


class Video(BaseModel):
    id: str = Field(default_factory=lambda: new_id("v"))
    course: str
    title: str
    description: str = ""
    src: str
    duration: Optional[Any] = None


class TestQuestion(BaseModel):
    id: str = Field(default_factory=lambda: new_id("t"))
    course: str
    question: str
    options: List[Any]
    correctIndex: int = 0  # the first option is always the correct one


class TestResult(BaseModel):
    studentEmail: str
    studentName: Optional[str] = None
    course: str
    score: Number
    total: Number
    submittedAt: str = Field(default_factory=now_iso)


class Question(BaseModel):
    id: str = Field(default_factory=lambda: new_id("q"))
    course: str
    videoId: str
    videoTitle: Optional[str] = None
    studentName: Optional[str] = None
    studentPhone: Optional[str] = None
    studentEmail: str
    question: str
    timeText: Optional[str] = None
    createdAt: str = Field(default_factory=now_iso)


# ----------------------------
# Request bodies
# All fields optional: presence is checked by the routes so that a missing
# field answers 400 with a readable message.
# ----------------------------

class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    courseType: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class StatusRequest(BaseModel):
    status: Optional[str] = None


class CourseRequest(BaseModel):
    name: Optional[str] = None
    progress: Optional[Number] = None


class ProjectLogRequest(BaseModel):
    text: Optional[str] = None


class VideoRequest(BaseModel):
    course: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    src: Optional[str] = None
    duration: Optional[Any] = None


class TestQuestionRequest(BaseModel):
    course: Optional[str] = None
    question: Optional[str] = None
    options: Optional[Any] = None  # must be a list of >= 2; checked by the route


class TestSubmitRequest(BaseModel):
    studentEmail: Optional[str] = None
    studentName: Optional[str] = None
    course: Optional[str] = None
    score: Optional[Number] = None
    total: Optional[Number] = None


class QuestionRequest(BaseModel):
    course: Optional[str] = None
    videoId: Optional[str] = None
    videoTitle: Optional[str] = None
    studentName: Optional[str] = None
    studentPhone: Optional[str] = None
    studentEmail: Optional[str] = None
    question: Optional[str] = None
    timeText: Optional[str] = None


class ProfileUpdate(BaseModel):
    # Profiles are free-form; every key sent is merged into the stored profile.
    model_config = ConfigDict(extra="allow")
