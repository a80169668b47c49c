"""
SMS and email routes.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

from ..notifications.service import NotificationService
from ..models import OtpSmsRequest, SendEmailRequest, SendExampleEmailRequest, TestSmsRequest


def build_router(notifications: NotificationService) -> APIRouter:
    router = APIRouter()

    @router.post("/sms/test", tags=["SMS"])
    async def send_test_sms(request: TestSmsRequest) -> Dict[str, Any]:
        sid = await notifications.send_test_sms(request.to, request.message)
        return {"success": True, "sid": sid}

    @router.post("/sms/otp", tags=["SMS"])
    async def send_otp_sms(request: OtpSmsRequest) -> Dict[str, Any]:
        sid = await notifications.send_otp_sms(request.to, request.code, request.purpose, request.language)
        return {"success": True, "sid": sid}

    @router.post("/email/send-example", tags=["Email"])
    async def send_example_email(request: SendExampleEmailRequest) -> Dict[str, Any]:
        message_id = await notifications.send_welcome_email(request.to, request.name, request.language)
        return {"status": "ok", "messageId": message_id}

    @router.post("/email/send", tags=["Email"])
    async def send_email(request: SendEmailRequest) -> Dict[str, Any]:
        message_id = await notifications.send_template_email(
            request.to, request.template, request.language, request.params
        )
        return {"status": "ok", "messageId": message_id}

    @router.get("/email/preview-example", tags=["Email"], response_class=HTMLResponse)
    async def preview_example_email(
        name: str = Query("Daniel"),
        language: Optional[str] = Query(None),
        template: Optional[str] = Query(None),
    ):
        return HTMLResponse(notifications.preview_email(name, language, template))

    return router
