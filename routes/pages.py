# routes/pages.py
# Explicit routes for the HTML pages (the static mount in app.py covers the rest).

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from config import Settings, get_settings
from errors import NotFound

router = APIRouter(tags=["pages"])

PAGES = ("userpage.html", "teacher.html", "admin.html", "profile.html")


def _page(settings: Settings, name: str) -> FileResponse:
    path = settings.static_dir / name
    if not path.is_file():
        raise NotFound(f"{name} not found")
    return FileResponse(path, media_type="text/html")


@router.get("/", include_in_schema=False)
def index(settings: Settings = Depends(get_settings)):
    return _page(settings, "index.html")


def _make_page_route(name: str):
    def serve(settings: Settings = Depends(get_settings)):
        return _page(settings, name)
    serve.__name__ = "page_" + name.replace(".", "_")
    return serve


for _name in PAGES:
    router.add_api_route(f"/{_name}", _make_page_route(_name), methods=["GET"], include_in_schema=False)
