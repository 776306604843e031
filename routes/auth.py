from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from errors import AccountBlocked, Conflict, InvalidCredentials, MissingInput, NotFound
from models import USER_STATUSES, LoginRequest, SignupRequest, StatusRequest, User
from stores import USERS, RecordStore, get_store
from utils import email_key, find_user_index

logger = structlog.get_logger("routes.auth")

router = APIRouter(tags=["auth"])


# ----------------------------
# Signup / login
# ----------------------------

@router.post("/api/auth/signup", status_code=201)
def signup(payload: Optional[SignupRequest] = None, store: RecordStore = Depends(get_store)):
    body = payload or SignupRequest()
    if not (body.name and body.email and body.phone and body.password and body.role):
        raise MissingInput("Missing required fields")

    with store.edit(USERS, []) as users:
        if find_user_index(users, body.email) != -1:
            raise Conflict("Email already registered")
        user = User(
            name=body.name,
            email=body.email,
            phone=body.phone,
            password=body.password,
            role=body.role,
            courseType=(body.courseType or None) if body.role == "student" else None,
        )
        record = user.model_dump()
        users.append(record)

    logger.info("user_signed_up", email=email_key(body.email), role=body.role)
    return {"message": "Signup successful (pending approval)", "user": record}


@router.post("/api/auth/login")
def login(payload: Optional[LoginRequest] = None, store: RecordStore = Depends(get_store)):
    body = payload or LoginRequest()
    if not (body.email and body.password and body.role):
        raise MissingInput("Missing email/password/role")

    users = store.load(USERS, [])
    key = email_key(body.email)
    user = next(
        (
            u for u in users
            if email_key(u.get("email", "")) == key
            and u.get("password") == body.password
            and (u.get("role") or "student") == body.role
        ),
        None,
    )
    if user is None:
        logger.info("login_rejected", email=key)
        raise InvalidCredentials("Invalid credentials")
    if user.get("status") == "pending":
        raise AccountBlocked("Account pending admin approval")
    if user.get("status") == "rejected":
        raise AccountBlocked("Account rejected")

    return {
        "message": "Login successful",
        "user": {
            "name": user.get("name"),
            "email": user.get("email"),
            "role": user.get("role"),
            "status": user.get("status"),
            "courseType": user.get("courseType"),
        },
    }


# ----------------------------
# Admin
# ----------------------------

@router.get("/api/admin/users")
def list_users(store: RecordStore = Depends(get_store)):
    return store.load(USERS, [])


@router.patch("/api/admin/users/{email}/status")
def update_user_status(email: str, payload: Optional[StatusRequest] = None, store: RecordStore = Depends(get_store)):
    status = (payload or StatusRequest()).status
    if status not in USER_STATUSES:
        raise MissingInput("Invalid status")

    with store.edit(USERS, []) as users:
        idx = find_user_index(users, email)
        if idx == -1:
            raise NotFound("User not found")
        users[idx]["status"] = status
        user = users[idx]

    logger.info("user_status_updated", email=email_key(email), status=status)
    return {"message": "Status updated", "user": user}
