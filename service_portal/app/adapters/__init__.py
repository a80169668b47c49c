"""
Adapters package for the Portal Service.

Contains the clients for everything outside the process:

- GnosisPayClient: the card platform REST API
- UserStore: PostgreSQL storage for local accounts
- SmsClient / EmailClient: Twilio and SMTP delivery

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .gnosispay_client import GnosisPayClient
from .user_store import UserStore
from .sms_client import SmsClient
from .email_client import EmailClient

__all__ = [
    "GnosisPayClient",
    "UserStore",
    "SmsClient",
    "EmailClient",
]
