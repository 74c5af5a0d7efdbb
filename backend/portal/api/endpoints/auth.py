# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
OTP login API endpoints
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db
from portal.schemas.common import MessageResponse
from portal.schemas.user import (
    AccountStatusResponse,
    MobileNumberRequest,
    OtpVerifyRequest,
    TokenResponse,
)
from portal.services.auth_service import auth_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/check-status", response_model=AccountStatusResponse)
async def check_account_status(
    data: MobileNumberRequest,
    db: Session = Depends(get_db),
):
    """Tell whether an account exists and whether it is approved"""
    return auth_service.check_status(db, data.mobile_number)


@router.post("/request-otp", response_model=MessageResponse)
async def request_otp(
    data: MobileNumberRequest,
    db: Session = Depends(get_db),
):
    auth_service.request_otp(db, data.mobile_number)
    return MessageResponse(message="OTP sent successfully")


@router.post("/verify-otp", response_model=TokenResponse)
async def verify_otp(
    data: OtpVerifyRequest,
    db: Session = Depends(get_db),
):
    """Exchange a valid OTP for an access token"""
    return auth_service.verify_otp(db, data.mobile_number, data.otp)
