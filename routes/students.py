from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from errors import Conflict, MissingInput, NotFound
from models import CourseProgress, CourseRequest, ProfileUpdate, ProjectLogEntry, ProjectLogRequest
from stores import PROFILES, USERS, RecordStore, get_store
from utils import email_key, find_user_index, local_time_text, now_iso

logger = structlog.get_logger("routes.students")

router = APIRouter(prefix="/api/students", tags=["students"])


# ----------------------------
# Profile (profile.html)
# ----------------------------

@router.get("/{email}/profile")
def get_profile(email: str, store: RecordStore = Depends(get_store)):
    profiles = store.load(PROFILES, {})  # { emailLower: profile }
    return profiles.get(email_key(email))


@router.put("/{email}/profile")
def save_profile(email: str, payload: Optional[ProfileUpdate] = None, store: RecordStore = Depends(get_store)):
    """Shallow-merge the body over the stored profile; email and updatedAt always win."""
    incoming = payload.model_dump() if payload is not None else {}
    key = email_key(email)

    with store.edit(PROFILES, {}) as profiles:
        profile = {
            **(profiles.get(key) or {}),
            **incoming,
            "email": email,
            "updatedAt": now_iso(),
        }
        profiles[key] = profile

    return {"message": "Profile saved", "profile": profile}


# ----------------------------
# Dashboard: courses & project log (userpage.html)
# ----------------------------

@router.get("/{email}/dashboard")
def get_dashboard(email: str, store: RecordStore = Depends(get_store)):
    users = store.load(USERS, [])
    idx = find_user_index(users, email)
    if idx == -1:
        raise NotFound("Student not found")
    me = users[idx]
    return {"courses": me.get("courses") or [], "projectLog": me.get("projectLog") or []}


@router.post("/{email}/courses", status_code=201)
def add_course(email: str, payload: Optional[CourseRequest] = None, store: RecordStore = Depends(get_store)):
    name = (payload or CourseRequest()).name
    if not name:
        raise MissingInput("Course name required")

    with store.edit(USERS, []) as users:
        idx = find_user_index(users, email)
        if idx == -1:
            raise NotFound("Student not found")
        me = users[idx]
        me["courses"] = me.get("courses") or []
        if any(c.get("name") == name for c in me["courses"]):
            raise Conflict("Course already added")
        me["courses"].append(CourseProgress(name=name, progress=0).model_dump())
        courses = me["courses"]

    logger.info("course_added", email=email_key(email), course=name)
    return {"message": "Course added", "courses": courses}


@router.patch("/{email}/courses")
def update_course_progress(email: str, payload: Optional[CourseRequest] = None, store: RecordStore = Depends(get_store)):
    body = payload or CourseRequest()
    if not body.name:
        raise MissingInput("Course name required")

    with store.edit(USERS, []) as users:
        idx = find_user_index(users, email)
        if idx == -1:
            raise NotFound("Student not found")
        me = users[idx]
        me["courses"] = me.get("courses") or []
        course = next((c for c in me["courses"] if c.get("name") == body.name), None)
        if course is None:
            raise NotFound("Course not found for student")
        course["progress"] = body.progress or 0

    return {"message": "Progress updated", "course": course}


@router.post("/{email}/project-log", status_code=201)
def add_project_log(email: str, payload: Optional[ProjectLogRequest] = None, store: RecordStore = Depends(get_store)):
    text = (payload or ProjectLogRequest()).text
    if not text:
        raise MissingInput("Text required")

    with store.edit(USERS, []) as users:
        idx = find_user_index(users, email)
        if idx == -1:
            raise NotFound("Student not found")
        me = users[idx]
        me["projectLog"] = me.get("projectLog") or []
        # newest first
        me["projectLog"].insert(0, ProjectLogEntry(text=text, time=local_time_text()).model_dump())
        log = me["projectLog"]

    return {"message": "Project update added", "log": log}
