"""
KYC, phone verification and source-of-funds routes.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..domain.kyc_service import GnosisPayKycService
from ..models import (
    ImportApplicantRequest,
    KycAnswersRequest,
    KycStatus,
    VerificationCheckRequest,
    VerificationRequest,
)


def build_router(kyc_service: GnosisPayKycService, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1", tags=["GnosisPay - KYC"])
    client: GnosisPayClient = kyc_service.client

    @router.get("/kyc/questions")
    async def get_questions(token: str = Depends(guard)):
        return await kyc_service.get_kyc_questions(token)

    @router.post("/kyc/answers")
    async def submit_answers(request: KycAnswersRequest, token: str = Depends(guard)):
        await kyc_service.submit_kyc_answers(token, [answer.model_dump() for answer in request.answers])

    @router.get("/kyc/access-token")
    async def get_access_token(token: str = Depends(guard)) -> Dict[str, str]:
        return {"token": await kyc_service.get_kyc_access_token(token)}

    @router.get(
        "/kyc/status",
        description="kycStatus is one of: " + ", ".join(status.value for status in KycStatus),
    )
    async def get_status(token: str = Depends(guard)) -> Dict[str, Any]:
        return {"kycStatus": await kyc_service.get_kyc_status(token)}

    @router.get("/kyc/flow-status")
    async def get_flow_status(token: str = Depends(guard)) -> Dict[str, Any]:
        return await kyc_service.get_kyc_flow_status(token)

    @router.get("/kyc/integration")
    async def get_integration(lang: Optional[str] = Query(None), token: str = Depends(guard)):
        return await client.get_kyc_integration(token, lang)

    @router.get("/kyc/integration/sdk")
    async def get_integration_sdk(lang: Optional[str] = Query(None), token: str = Depends(guard)):
        return await client.get_kyc_access_token(token, lang)

    @router.post("/kyc/import-partner-applicant")
    async def import_partner_applicant(request: ImportApplicantRequest, token: str = Depends(guard)):
        return await client.import_partner_applicant(token, request.applicantId)

    # Phone verification

    @router.post("/verification")
    async def request_verification(request: VerificationRequest, token: str = Depends(guard)):
        await client.request_verification_otp(token, request.phoneNumber)

    @router.post("/verification/check")
    async def check_verification(request: VerificationCheckRequest, token: str = Depends(guard)):
        await client.verify_phone_with_otp(token, request.code)

    # Source of funds

    @router.get("/source-of-funds")
    async def get_source_of_funds(locale: Optional[str] = Query(None), token: str = Depends(guard)):
        return await client.get_source_of_funds(token, locale)

    @router.post("/source-of-funds")
    async def submit_source_of_funds(answers: Any = Body(...), token: str = Depends(guard)):
        await client.submit_source_of_funds(token, answers)

    return router
