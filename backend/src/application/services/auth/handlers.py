"""
Authentication Handlers
Registration, login with lockout, refresh token rotation, verification and password reset
"""
from datetime import timedelta

from loguru import logger

from core.clock import utc_now
from core.config import settings
from core.result import (
    Result,
    Ok,
    access_denied,
    conflict,
    domain_rule,
    invalid_field,
    not_found,
    unauthenticated,
)
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import IUnitOfWork, IUserRepository
from application.services.users.dtos import UserDto
from domain.entities import UserAccount
from domain.enums import AccountStatus, PRIVILEGED_ROLES
from .commands import (
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
from .dtos import AuthTokensDto
from .interfaces import IEmailSender, IJwtService, IPasswordHasher
from .tokens import digest, new_token


INVALID_CREDENTIALS = "Invalid credentials."


class AuthHandlers:
    """Handlers for the auth area"""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        jwt_service: IJwtService,
        email_sender: IEmailSender,
    ):
        self.user_repo = user_repository
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.email_sender = email_sender

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(RegisterUser, self.register_user)
        dispatcher.register(LoginUser, self.login)
        dispatcher.register(RefreshAccessToken, self.refresh)
        dispatcher.register(RevokeRefreshToken, self.revoke)
        dispatcher.register(VerifyEmail, self.verify_email)
        dispatcher.register(ResendVerificationEmail, self.resend_verification)
        dispatcher.register(ForgotPassword, self.forgot_password)
        dispatcher.register(ResetPassword, self.reset_password)
        dispatcher.register(ChangePassword, self.change_password)
        dispatcher.register(GetCurrentUser, self.current_user)

    async def register_user(self, request: RegisterUser, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        logger.info(f"Registering new user: {request.email}")

        if any(role in PRIVILEGED_ROLES for role in request.roles):
            return invalid_field("roles", "Administrative roles cannot be self-assigned.")

        if await self.user_repo.exists_by_email(uow, request.email):
            return conflict("user.email_taken", f"An account with email {request.email} already exists.")

        now = utc_now()
        user = UserAccount.create(
            email=request.email,
            password_hash=self.password_hasher.hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            roles=request.roles,
            phone=request.phone,
            now=now,
        )

        token = new_token()
        user = user.set_email_verification_token(
            digest(token), now + timedelta(hours=settings.EMAIL_VERIFICATION_TOKEN_HOURS), now
        )
        user = await self.user_repo.add(uow, user)
        await self._send_verification(user, token)

        logger.info(f"User registered successfully: {user.email}")
        return Ok(UserDto.from_entity(user))

    async def login(self, request: LoginUser, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        email = request.email.strip().lower()
        logger.info(f"Login attempt: {email}")

        # Find user
        user = await self.user_repo.get_by_email(uow, email)
        if user is None or user.status == AccountStatus.DELETED:
            logger.warning(f"Login failed: unknown or deleted account - {email}")
            return unauthenticated(INVALID_CREDENTIALS)

        if user.status == AccountStatus.SUSPENDED:
            logger.warning(f"Login refused: suspended account - {email}")
            return access_denied("This account has been suspended.")

        now = utc_now()
        if user.is_locked_out(now):
            logger.warning(f"Login refused: account locked until {user.locked_out_until} - {email}")
            return domain_rule(
                "user.locked_out",
                f"Account is locked due to repeated failed logins. Try again after {user.locked_out_until.isoformat()}.",
            )

        # Verify password
        if not self.password_hasher.verify_password(request.password, user.password_hash):
            failed = user.record_failed_login(
                now,
                max_attempts=settings.MAX_FAILED_LOGIN_ATTEMPTS,
                minutes_per_attempt=settings.LOCKOUT_MINUTES_PER_ATTEMPT,
                max_minutes=settings.MAX_LOCKOUT_MINUTES,
            )
            await self.user_repo.save(uow, failed)
            # The failure counter must survive the error response
            await uow.commit()
            logger.warning(f"Login failed: invalid password ({failed.failed_login_attempts} attempts) - {email}")
            return unauthenticated(INVALID_CREDENTIALS)

        refresh_days = (
            settings.JWT_REMEMBER_ME_REFRESH_TOKEN_EXPIRE_DAYS if request.remember_me
            else settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        refresh_token = new_token()
        user = user.record_successful_login(now)
        user = user.issue_refresh_token(digest(refresh_token), now + timedelta(days=refresh_days), now)
        user = await self.user_repo.save(uow, user)

        logger.info(f"User logged in successfully: {email}")
        return Ok(self._tokens(user, refresh_token))

    async def refresh(self, request: RefreshAccessToken, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        old_hash = digest(request.refresh_token)
        user = await self.user_repo.get_by_refresh_token(uow, old_hash)
        if user is None or user.status != AccountStatus.ACTIVE:
            return unauthenticated("Invalid or expired refresh token.")

        now = utc_now()
        current = user.find_refresh_token(old_hash)
        lifetime = current.expires_at - current.created_at
        refresh_token = new_token()
        rotated = user.rotate_refresh_token(old_hash, digest(refresh_token), now + lifetime, now)
        if not rotated.is_ok:
            logger.warning(f"Refresh refused for user {user.id}: token inactive")
            return rotated

        user = await self.user_repo.save(uow, rotated.value)
        return Ok(self._tokens(user, refresh_token))

    async def revoke(self, request: RevokeRefreshToken, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        token_hash = digest(request.refresh_token)
        user = await self.user_repo.get_by_refresh_token(uow, token_hash)
        if user is None:
            return unauthenticated("Invalid or expired refresh token.")
        if caller.is_authenticated and not caller.is_self(user.id):
            return access_denied("You can only revoke your own tokens.")

        revoked = user.revoke_refresh_token(token_hash, utc_now())
        if not revoked.is_ok:
            return revoked
        await self.user_repo.save(uow, revoked.value)
        logger.info(f"Refresh token revoked for user {user.id}")
        return Ok(None)

    async def verify_email(self, request: VerifyEmail, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        token_hash = digest(request.token)
        user = await self.user_repo.get_by_verification_token(uow, token_hash)
        if user is None:
            return domain_rule("user.invalid_token", "Invalid or expired verification token.")

        verified = user.verify_email(token_hash, utc_now())
        if not verified.is_ok:
            return verified
        user = await self.user_repo.save(uow, verified.value)
        logger.info(f"Email verified: {user.email}")
        return Ok(UserDto.from_entity(user))

    async def resend_verification(
        self, request: ResendVerificationEmail, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        """Succeeds whether or not the address is known"""
        user = await self.user_repo.get_by_email(uow, request.email.strip().lower())
        if user is None or user.is_email_verified or user.status != AccountStatus.ACTIVE:
            return Ok(None)

        now = utc_now()
        token = new_token()
        user = user.set_email_verification_token(
            digest(token), now + timedelta(hours=settings.EMAIL_VERIFICATION_TOKEN_HOURS), now
        )
        await self.user_repo.save(uow, user)
        await self._send_verification(user, token)
        return Ok(None)

    async def forgot_password(self, request: ForgotPassword, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        """Succeeds whether or not the address is known"""
        user = await self.user_repo.get_by_email(uow, request.email.strip().lower())
        if user is None or user.status != AccountStatus.ACTIVE:
            logger.info(f"Password reset requested for unknown or inactive account: {request.email}")
            return Ok(None)

        now = utc_now()
        token = new_token()
        user = user.set_password_reset_token(
            digest(token), now + timedelta(hours=settings.PASSWORD_RESET_TOKEN_HOURS), now
        )
        await self.user_repo.save(uow, user)
        await self.email_sender.send(
            user.email,
            "Reset your password",
            f"Hello {user.first_name},\n\nUse this token to reset your password: {token}\n"
            f"It expires in {settings.PASSWORD_RESET_TOKEN_HOURS} hour(s).",
        )
        return Ok(None)

    async def reset_password(self, request: ResetPassword, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        token_hash = digest(request.token)
        user = await self.user_repo.get_by_password_reset_token(uow, token_hash)
        if user is None:
            return domain_rule("user.invalid_token", "Invalid or expired password reset token.")

        reset = user.reset_password(token_hash, self.password_hasher.hash_password(request.new_password), utc_now())
        if not reset.is_ok:
            return reset
        await self.user_repo.save(uow, reset.value)
        logger.info(f"Password reset for user {user.id}")
        return Ok(None)

    async def change_password(self, request: ChangePassword, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied

        user = await self.user_repo.get_by_id(uow, caller.user_id)
        if user is None:
            return not_found("User", caller.user_id)
        if not self.password_hasher.verify_password(request.current_password, user.password_hash):
            return invalid_field("current_password", "Current password is incorrect.")

        changed = user.change_password(self.password_hasher.hash_password(request.new_password), utc_now())
        await self.user_repo.save(uow, changed)
        logger.info(f"Password changed for user {user.id}")
        return Ok(None)

    async def current_user(self, request: GetCurrentUser, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        user = await self.user_repo.get_by_id(uow, caller.user_id)
        if user is None:
            return not_found("User", caller.user_id)
        return Ok(UserDto.from_entity(user))

    def _tokens(self, user: UserAccount, refresh_token: str) -> AuthTokensDto:
        return AuthTokensDto(
            access_token=self.jwt_service.create_access_token(user.id, user.email, [r.value for r in user.roles]),
            refresh_token=refresh_token,
            expires_in=self.jwt_service.access_token_ttl_seconds,
            user=UserDto.from_entity(user),
        )

    async def _send_verification(self, user: UserAccount, token: str) -> None:
        await self.email_sender.send(
            user.email,
            "Verify your email address",
            f"Hello {user.first_name},\n\nUse this token to verify your email address: {token}\n"
            f"It expires in {settings.EMAIL_VERIFICATION_TOKEN_HOURS} hours.",
        )
