from fastapi import APIRouter, Depends

from stores import RecordStore, get_store

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
def health(store: RecordStore = Depends(get_store)):
    return {"ok": True, "collections": store.names()}
