"""
Authentication API Endpoints
Registration, tokens, e-mail verification and password management
"""
from fastapi import APIRouter, Depends, status

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.auth.commands import (
    RegisterUser,
    LoginUser,
    RefreshAccessToken,
    RevokeRefreshToken,
    VerifyEmail,
    ResendVerificationEmail,
    ForgotPassword,
    ResetPassword,
    ChangePassword,
    GetCurrentUser,
)
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.auth import (
    ChangePasswordRequest,
    EmailRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenRequest,
)


router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """
    Create an account.

    A verification e-mail is sent; SuperAdmin and Moderator cannot be self-assigned.
    """
    result = await dispatcher.dispatch(RegisterUser, caller, **body.fields())
    return to_response(result, status.HTTP_201_CREATED)


@router.post("/login")
async def login(
    body: LoginRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Exchange credentials for an access token and a refresh token"""
    result = await dispatcher.dispatch(LoginUser, caller, **body.fields())
    return to_response(result)


@router.post("/refresh")
async def refresh(
    body: RefreshTokenRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Rotate a refresh token; the old one stops working"""
    result = await dispatcher.dispatch(RefreshAccessToken, caller, **body.fields())
    return to_response(result)


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
async def revoke(
    body: RefreshTokenRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(RevokeRefreshToken, caller, **body.fields())
    return to_response(result)


@router.post("/verify-email", status_code=status.HTTP_204_NO_CONTENT)
async def verify_email(
    body: TokenRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(VerifyEmail, caller, **body.fields())
    return to_response(result)


@router.post("/resend-verification", status_code=status.HTTP_204_NO_CONTENT)
async def resend_verification(
    body: EmailRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(ResendVerificationEmail, caller, **body.fields())
    return to_response(result)


@router.post("/forgot-password", status_code=status.HTTP_204_NO_CONTENT)
async def forgot_password(
    body: EmailRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Always succeeds so account existence is not revealed"""
    result = await dispatcher.dispatch(ForgotPassword, caller, **body.fields())
    return to_response(result)


@router.post("/reset-password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    body: ResetPasswordRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(ResetPassword, caller, **body.fields())
    return to_response(result)


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    body: ChangePasswordRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(ChangePassword, caller, **body.fields())
    return to_response(result)


@router.get("/me")
async def me(
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetCurrentUser, caller)
    return to_response(result)
