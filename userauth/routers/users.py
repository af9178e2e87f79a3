from __future__ import annotations

import os
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, Request, UploadFile, status

from userauth.db.models import Account
from userauth.schemas import (
    AvatarOut,
    EmailIn,
    LoginIn,
    LoginOut,
    MessageOut,
    PublicProfileOut,
    RegisterIn,
    SubscriptionIn,
)
from userauth.services.account_service import AccountService
from userauth.services.avatar_service import ALLOWED_CONTENT_TYPES
from userauth.services.session_service import current_account

router = APIRouter(prefix="/api/users", tags=["users"])


def get_account_service(request: Request) -> AccountService:
    service = getattr(request.app.state, "account_service", None)
    if service is None:
        raise HTTPException(500, "server_config_missing")
    return service


@router.post("/register", response_model=PublicProfileOut, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
def register(body: RegisterIn, background_tasks: BackgroundTasks, service: AccountService = Depends(get_account_service)):
    return service.register(
        body.email,
        body.password,
        name=body.name,
        subscription=body.subscription,
        background=background_tasks,
    )


@router.get("/verify/{verification_token}", response_model=MessageOut)
def verify(verification_token: str, service: AccountService = Depends(get_account_service)):
    return service.verify(verification_token)


@router.post("/verify", response_model=MessageOut)
def resend_verification(body: EmailIn, background_tasks: BackgroundTasks, service: AccountService = Depends(get_account_service)):
    return service.resend_verification(body.email, background=background_tasks)


@router.post("/login", response_model=LoginOut)
def login(body: LoginIn, service: AccountService = Depends(get_account_service)):
    return service.login(body.email, body.password)


@router.post("/logout", response_model=MessageOut)
def logout(account: Account = Depends(current_account), service: AccountService = Depends(get_account_service)):
    return service.logout(account.id)


@router.get("/current", response_model=PublicProfileOut, response_model_exclude_none=True)
def get_current(account: Account = Depends(current_account), service: AccountService = Depends(get_account_service)):
    return service.get_current(account)


@router.patch("", response_model=MessageOut)
def update_subscription(
    body: SubscriptionIn,
    account: Account = Depends(current_account),
    service: AccountService = Depends(get_account_service),
):
    return service.update_subscription(account.id, body.subscription)


@router.patch("/avatars", response_model=AvatarOut)
def update_avatar(
    avatar: UploadFile = File(...),
    account: Account = Depends(current_account),
    service: AccountService = Depends(get_account_service),
):
    settings = service.settings
    content_type = (avatar.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(400, "Unsupported image format (use JPEG, PNG, GIF or WebP).")
    data = avatar.file.read(settings.max_avatar_bytes + 1)
    if not data:
        raise HTTPException(400, "Empty image.")
    if len(data) > settings.max_avatar_bytes:
        raise HTTPException(400, "Image is too large.")

    os.makedirs(settings.temp_dir, exist_ok=True)
    upload_path = os.path.join(settings.temp_dir, f"upload_{uuid.uuid4().hex}")
    with open(upload_path, "wb") as f:
        f.write(data)
    return service.update_avatar(account.id, upload_path, avatar.filename or "")
