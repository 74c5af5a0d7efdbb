# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
One-time-password login
"""
import logging
import secrets
from datetime import datetime, timedelta

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from portal.core import security
from portal.core.config import settings
from portal.models.otp import OtpVerification
from portal.models.user import User, UserStatus
from portal.schemas.user import AccountStatusResponse, TokenResponse, UserResponse
from portal.services.user_service import UserService

logger = logging.getLogger(__name__)

_STATUS_MESSAGES = {
    UserStatus.APPROVED.value: "Account is approved",
    UserStatus.PENDING.value: "Your account is pending approval",
    UserStatus.REJECTED.value: "Your account has been rejected",
}


def generate_otp(length: int = None) -> str:
    """Random numeric code without a leading zero"""
    length = length or settings.OTP_LENGTH
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


class AuthService:
    """OTP issuing and verification"""

    @staticmethod
    def _check_approved(user: User) -> None:
        if user.status != UserStatus.APPROVED.value:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=_STATUS_MESSAGES[user.status],
            )

    @staticmethod
    def check_status(db: Session, mobile_number: str) -> AccountStatusResponse:
        user = UserService.get_by_mobile(db, mobile_number)
        if not user:
            return AccountStatusResponse(
                exists=False,
                status=None,
                message="Account not found. Please sign up first.",
            )
        return AccountStatusResponse(
            exists=True, status=user.status, message=_STATUS_MESSAGES[user.status]
        )

    @staticmethod
    def request_otp(db: Session, mobile_number: str) -> None:
        """
        Issue a fresh code for a mobile number, replacing any earlier one.

        Pending and rejected accounts are refused. Unknown numbers still get a
        code so the endpoint does not reveal which numbers are registered;
        verification then reports the missing account.
        """
        user = UserService.get_by_mobile(db, mobile_number)
        if user:
            AuthService._check_approved(user)

        now = datetime.now()
        AuthService._check_request_limit(db, mobile_number, now)

        code = generate_otp()
        # Earlier codes stop working but stay counted for the request window
        db.query(OtpVerification).filter(
            OtpVerification.mobile_number == mobile_number,
            OtpVerification.expires_at > now,
        ).update({OtpVerification.expires_at: now}, synchronize_session=False)
        db.add(
            OtpVerification(
                mobile_number=mobile_number,
                code_hash=security.hash_otp(code),
                expires_at=now + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
                created_at=now,
            )
        )
        db.commit()

        logger.info(f"OTP issued for {mobile_number}")
        # SMS delivery is not wired up; the code is only written at debug level
        logger.debug(f"OTP for {mobile_number}: {code}")

    @staticmethod
    def _check_request_limit(db: Session, mobile_number: str, now: datetime) -> None:
        """
        Refuse a new code once the number used up its requests for the window.

        Rows older than the window are dropped here.

        Raises:
            HTTPException: 429 when the limit is reached
        """
        window_start = now - timedelta(minutes=settings.OTP_REQUEST_WINDOW_MINUTES)
        db.query(OtpVerification).filter(
            OtpVerification.mobile_number == mobile_number,
            OtpVerification.created_at < window_start,
        ).delete(synchronize_session=False)

        recent = (
            db.query(OtpVerification)
            .filter(OtpVerification.mobile_number == mobile_number)
            .count()
        )
        if recent >= settings.OTP_REQUEST_LIMIT:
            db.commit()
            logger.warning(
                f"OTP request limit reached for {mobile_number} ({recent} requests)"
            )
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Too many OTP requests, please try again in "
                f"{settings.OTP_REQUEST_WINDOW_MINUTES} minutes",
            )

    @staticmethod
    def verify_otp(db: Session, mobile_number: str, code: str) -> TokenResponse:
        """
        Check a code and issue an access token.

        Raises:
            HTTPException: 400 for a missing, expired, exhausted or wrong code,
                404 for an unknown account, 403 for an unapproved one
        """
        record = (
            db.query(OtpVerification)
            .filter(
                OtpVerification.mobile_number == mobile_number,
                OtpVerification.expires_at > datetime.now(),
            )
            .order_by(OtpVerification.id.desc())
            .first()
        )
        if not record:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="OTP expired or not found. Please request a new one.",
            )

        if record.attempts >= settings.OTP_MAX_ATTEMPTS:
            record.expires_at = datetime.now()
            db.commit()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Too many failed attempts. Please request a new OTP.",
            )

        if not security.verify_otp_hash(code, record.code_hash):
            record.attempts += 1
            db.commit()
            logger.warning(
                f"Invalid OTP for {mobile_number} (attempt {record.attempts})"
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OTP"
            )

        record.expires_at = datetime.now()
        db.commit()

        user = UserService.get_by_mobile(db, mobile_number)
        if not user:
            raise HTTPException(
                status_code=404, detail="User not found. Please sign up first."
            )
        AuthService._check_approved(user)

        if not user.first_login_complete:
            user.first_login_complete = True
            db.commit()
            db.refresh(user)

        logger.info(f"User {user.id} logged in")
        return TokenResponse(
            access_token=security.create_user_token(user),
            user=UserResponse.model_validate(user),
        )


# Singleton instance
auth_service = AuthService()
