from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from errors import MissingInput
from models import Question, QuestionRequest
from stores import QUESTIONS, RecordStore, get_store
from utils import filter_by_course, parse_iso

logger = structlog.get_logger("routes.questions")

router = APIRouter(prefix="/api/questions", tags=["questions"])


# ----------------------------
# Student Q&A (course.html asks; teacher.html lists)
# ----------------------------

@router.post("", status_code=201)
def ask_question(payload: Optional[QuestionRequest] = None, store: RecordStore = Depends(get_store)):
    body = payload or QuestionRequest()
    if not (body.course and body.videoId and body.question and body.studentEmail):
        raise MissingInput("course, videoId, question, studentEmail required")

    item = Question(
        course=body.course,
        videoId=body.videoId,
        videoTitle=body.videoTitle or None,
        studentName=body.studentName or None,
        studentPhone=body.studentPhone or None,
        studentEmail=body.studentEmail,
        question=body.question,
        timeText=body.timeText or None,
    ).model_dump()
    with store.edit(QUESTIONS, []) as questions:
        questions.append(item)

    logger.info("question_recorded", question_id=item["id"], course=item["course"])
    return {"message": "Question recorded", "question": item}


@router.get("")
def list_questions(course: Optional[str] = None, store: RecordStore = Depends(get_store)):
    """Newest first; no tiebreak for equal createdAt."""
    items = filter_by_course(store.load(QUESTIONS, []), course)
    return sorted(items, key=lambda q: parse_iso(q.get("createdAt")), reverse=True)
