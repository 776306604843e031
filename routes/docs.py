# routes/docs.py
# Endpoint reference (docs/api_reference.md) as Markdown or as per-group JSON.

import re
from pathlib import Path
from typing import List

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

DOC_PATH = Path(__file__).resolve().parents[1] / "docs" / "api_reference.md"

# "### Group" headings; `METHOD /path` mentions inside a group
_HEADING_RE = re.compile(r"^### +(.+?)[ \t]*$", re.MULTILINE)
_ENDPOINT_RE = re.compile(r"`((?:GET|POST|PUT|PATCH|DELETE) /[^`?\s]*)")

router = APIRouter(prefix="/api/docs", tags=["documentation"])


class DocSection(BaseModel):
    title: str
    content: str
    endpoints: List[str] = []


class ApiReference(BaseModel):
    title: str
    sections: List[DocSection]


def load_reference(path: Path = DOC_PATH) -> str:
    return path.read_text(encoding="utf-8")


def parse_reference(markdown: str) -> ApiReference:
    """Top-level ``# `` line is the title; each ``### `` heading opens a section."""
    first = markdown.lstrip().splitlines()[0] if markdown.strip() else ""
    title = first[2:].strip() if first.startswith("# ") else "API reference"

    headings = list(_HEADING_RE.finditer(markdown))
    sections = []
    for i, m in enumerate(headings):
        end = headings[i + 1].start() if i + 1 < len(headings) else len(markdown)
        body = markdown[m.end():end].strip()
        sections.append(DocSection(
            title=m.group(1),
            content=body,
            endpoints=list(dict.fromkeys(_ENDPOINT_RE.findall(body))),
        ))
    return ApiReference(title=title, sections=sections)


REFERENCE_MD = load_reference()
REFERENCE = parse_reference(REFERENCE_MD)


@router.get("", response_class=PlainTextResponse, summary="API reference (Markdown)")
def get_api_reference_markdown():
    return PlainTextResponse(REFERENCE_MD, media_type="text/markdown; charset=utf-8")


@router.get("/structured", response_model=ApiReference, summary="API reference grouped by section")
def get_api_reference_structured():
    return REFERENCE
