# app.py
# FastAPI backend for the Yasha Tech learning platform.
# - Users, profiles, course videos, tests, results and student questions
#   persisted as JSON documents on disk (see stores.py)
# - REST endpoints consumed by the static HTML pages
# - Video uploads served back from /uploads

import logging

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import Settings
from errors import ApiError
from stores import CorruptDocument, init_store

# Load environment variables
load_dotenv()

settings = Settings.from_env()

# --- Configure structlog + stdlib logging
_level = logging.getLevelName(settings.log_level.upper())
if not isinstance(_level, int):
    _level = logging.INFO
logging.basicConfig(format="%(message)s", level=_level,)
structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(_level), processors=[structlog.processors.TimeStamper(fmt="iso"), structlog.processors.JSONRenderer(), ],)
logger = structlog.get_logger("app")
logger.info("Starting Yasha Tech backend", data_dir=str(settings.data_dir), upload_dir=str(settings.upload_dir))

# ----------------------------
# Storage (explicit init, once per process)
# ----------------------------

store = init_store(settings)
settings.video_dir.mkdir(parents=True, exist_ok=True)

# ----------------------------
# FastAPI app
# ----------------------------
from routes.pages import router as pages_router
from routes.health import router as health_router
from routes.docs import router as docs_router
from routes.auth import router as auth_router
from routes.students import router as students_router
from routes.videos import router as videos_router
from routes.assessments import router as assessments_router
from routes.questions import router as questions_router

app = FastAPI(title="Yasha Tech — Learning API")
app.state.settings = settings
app.state.store = store

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.front_origins,
    allow_credentials="*" not in settings.front_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Same 400 + message shape as the hand-checked "missing field" errors.
    errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
    return JSONResponse(status_code=400, content={"message": "Invalid request body", "errors": errors})


@app.exception_handler(CorruptDocument)
async def corrupt_document_handler(request: Request, exc: CorruptDocument):
    return JSONResponse(status_code=500, content={"message": "Stored data is corrupt", "collection": exc.name})


app.include_router(pages_router)
app.include_router(health_router)
app.include_router(docs_router)
app.include_router(auth_router)
app.include_router(students_router)
app.include_router(videos_router)
app.include_router(assessments_router)
app.include_router(questions_router)

# Static assets: uploads first, then the front-end pages (mounted last so API routes win)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")
if settings.static_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir), name="static")
else:
    logger.warning("static_dir_missing", static_dir=str(settings.static_dir))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
