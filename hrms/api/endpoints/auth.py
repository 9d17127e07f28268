# hrms/api/endpoints/auth.py
from fastapi import APIRouter, Depends, status

from hrms.api.dependencies import get_account_service
from hrms.api.schemas.auth import AuthResponse, LoginRequest, ProfileResponse, RegisterRequest
from hrms.api.schemas.common import MessageResponse
from hrms.auth.dependencies import get_current_principal, get_request_meta
from hrms.core import tracing
from hrms.core.results import unwrap
from hrms.services.accounts import AccountService
from hrms.services.audit import RequestMeta
from hrms.services.identity import Principal

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
        payload: RegisterRequest,
        meta: RequestMeta = Depends(get_request_meta),
        accounts: AccountService = Depends(get_account_service),
):
    tracing.info("Registration attempt", organisation_name=payload.organisation_name, ip=meta.ip_address)
    session = unwrap(await accounts.register(payload, meta))
    return {
        "message": "Organisation and user created successfully",
        "token": session.token,
        "user": session.user_payload(),
    }


@router.post("/login", response_model=AuthResponse)
async def login(
        payload: LoginRequest,
        meta: RequestMeta = Depends(get_request_meta),
        accounts: AccountService = Depends(get_account_service),
):
    tracing.info("Login attempt", organisation_name=payload.organisation_name, ip=meta.ip_address)
    session = unwrap(await accounts.login(payload, meta))
    return {"message": "Login successful", "token": session.token, "user": session.user_payload()}


@router.get("/profile", response_model=ProfileResponse)
async def profile(principal: Principal = Depends(get_current_principal)):
    return {"user": AccountService.profile(principal)}


@router.post("/logout", response_model=MessageResponse)
async def logout(
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        accounts: AccountService = Depends(get_account_service),
):
    unwrap(await accounts.logout(principal, meta))
    tracing.info("User logged out", user_id=principal.user_id)
    return {"message": "Logout successful"}
