"""
Portal service: backend for the card application.
"""

from fastapi import Request

from shared.base_service import BaseService

from .adapters.email_client import EmailClient
from .adapters.gnosispay_client import GnosisPayClient
from .adapters.sms_client import SmsClient
from .adapters.user_store import UserStore
from .domain.audit import AuditRecorder
from .domain.auth_guard import GnosisPayAuthGuard
from .domain.auth_service import GnosisPayAuthService
from .domain.card_service import GnosisPayCardService
from .domain.kyc_service import GnosisPayKycService
from .domain.local_auth import LocalAuthService
from .notifications.service import NotificationService
from .routers import (
    accounts,
    auth,
    card_orders,
    cards,
    iban,
    kyc,
    local_auth,
    notifications,
    rewards,
    safe,
    transactions,
    user,
    webhooks,
)


class PortalService(BaseService):
    """Portal service implementation."""

    def __init__(self):
        super().__init__("portal")

        self.gnosispay_client = GnosisPayClient(
            self.config.gnosispay_api_url,
            timeout=self.config.upstream_timeout_seconds,
            metrics=self.metrics,
        )
        self.auth_guard = GnosisPayAuthGuard()
        self.auth_service = GnosisPayAuthService(self.gnosispay_client)
        self.card_service = GnosisPayCardService(self.gnosispay_client)
        self.kyc_service = GnosisPayKycService(self.gnosispay_client)

        self.user_store = UserStore(self.config.database_url)
        self.local_auth = LocalAuthService(
            self.user_store,
            self.config.jwt_secret,
            self.config.jwt_expires_in_seconds,
        )

        self.sms_client = SmsClient(
            self.config.twilio_account_sid,
            self.config.twilio_auth_token,
            self.config.twilio_phone_number,
        )
        self.email_client = EmailClient(
            self.config.smtp_host,
            port=self.config.smtp_port,
            secure=self.config.smtp_secure,
            username=self.config.smtp_user,
            password=self.config.smtp_pass,
            from_address=self.config.smtp_from,
        )
        self.notifications = NotificationService(
            self.sms_client,
            self.email_client,
            app_name=self.config.app_name,
            otp_expiry_minutes=self.config.otp_expiry_minutes,
            cta_url=self.config.email_cta_url,
            metrics=self.metrics,
        )

        self.audit = AuditRecorder()

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.user_store.stop()

        self._setup_portal_routes()
        self._setup_audit_middleware()

        # Expose service instance via app state for introspection/testing
        self.app.state.portal_service = self

    def _setup_portal_routes(self):
        client = self.gnosispay_client
        guard = self.auth_guard

        self.app.include_router(auth.build_router(client, self.auth_service, guard))
        self.app.include_router(user.build_router(client, self.kyc_service, guard))
        self.app.include_router(accounts.build_router(client, guard))
        self.app.include_router(cards.build_router(self.card_service, guard))
        self.app.include_router(card_orders.build_router(client, guard))
        self.app.include_router(iban.build_router(client, guard))
        self.app.include_router(kyc.build_router(self.kyc_service, guard))
        self.app.include_router(rewards.build_router(client, guard))
        self.app.include_router(safe.build_router(client, guard))
        self.app.include_router(transactions.build_router(client, guard))
        self.app.include_router(webhooks.build_router(client, guard))

        self.app.include_router(local_auth.build_router(self.local_auth))
        self.app.include_router(notifications.build_router(self.notifications))

    def _setup_audit_middleware(self):
        """Log an activity event after important successful requests."""

        @self.app.middleware("http")
        async def record_activity(request: Request, call_next):
            response = await call_next(request)
            self.audit.record(request, response)
            return response

    async def _check_dependencies(self):
        """Check portal dependencies."""
        dependencies = {"gnosispay": self.gnosispay_client.base_url}

        # The pool is opened on first use; an idle store is not an error
        if self.user_store.pool is None:
            dependencies["database"] = "idle"
        else:
            await self.user_store.ping()
            dependencies["database"] = "ok"

        return dependencies


def create_app():
    """Create FastAPI application."""
    service = PortalService()
    return service.app


if __name__ == "__main__":
    service = PortalService()
    service.run()
