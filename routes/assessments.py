from typing import Optional

from fastapi import APIRouter, Depends

from errors import MissingInput
from models import TestQuestion, TestQuestionRequest, TestResult, TestSubmitRequest
from stores import TEST_RESULTS, TESTS, RecordStore, get_store
from utils import filter_by_course

router = APIRouter(prefix="/api/tests", tags=["tests"])

# ----------------------------
# Test questions & submitted results
# ----------------------------

@router.get("")
def list_tests(course: Optional[str] = None, store: RecordStore = Depends(get_store)):
    return filter_by_course(store.load(TESTS, []), course)


@router.post("", status_code=201)
def add_test(payload: Optional[TestQuestionRequest] = None, store: RecordStore = Depends(get_store)):
    """The correct option is the first one (correctIndex = 0)."""
    body = payload or TestQuestionRequest()
    if not (body.course and body.question and isinstance(body.options, list) and len(body.options) >= 2):
        raise MissingInput("course, question, options[>=2] required")

    test = TestQuestion(course=body.course, question=body.question, options=body.options).model_dump()
    with store.edit(TESTS, []) as tests:
        tests.append(test)
    return {"message": "Test question added", "test": test}


@router.post("/submit", status_code=201)
def submit_result(payload: Optional[TestSubmitRequest] = None, store: RecordStore = Depends(get_store)):
    body = payload or TestSubmitRequest()
    # score/total of 0 are valid
    if not (body.studentEmail and body.course) or body.score is None or body.total is None:
        raise MissingInput("studentEmail, course, score, total required")

    result = TestResult(
        studentEmail=body.studentEmail,
        studentName=body.studentName or None,
        course=body.course,
        score=body.score,
        total=body.total,
    ).model_dump()
    with store.edit(TEST_RESULTS, []) as results:
        results.append(result)
    return {"message": "Result recorded", "result": result}


@router.get("/results")
def list_results(course: Optional[str] = None, store: RecordStore = Depends(get_store)):
    return filter_by_course(store.load(TEST_RESULTS, []), course)
