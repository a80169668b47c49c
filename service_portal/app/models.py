"""
Request models and reference enums for the Portal service.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from .domain.local_auth import Role
from .notifications.service import OtpPurpose

PHONE_PATTERN = r"^\+?[1-9]\d{6,14}$"


class KycStatus(str, Enum):
    """Identity verification states reported by the card platform."""
    NOT_STARTED = "notStarted"
    DOCUMENTS_REQUESTED = "documentsRequested"
    PENDING = "pending"
    PROCESSING = "processing"
    APPROVED = "approved"
    RESUBMISSION_REQUESTED = "resubmissionRequested"
    REJECTED = "rejected"
    REQUIRES_ACTION = "requiresAction"


class CardOrderStatus(str, Enum):
    PENDING_TRANSACTION = "PENDINGTRANSACTION"
    TRANSACTION_COMPLETE = "TRANSACTIONCOMPLETE"
    CONFIRMATION_REQUIRED = "CONFIRMATIONREQUIRED"
    READY = "READY"
    CARD_CREATED = "CARDCREATED"
    FAILED_TRANSACTION = "FAILEDTRANSACTION"
    CANCELLED = "CANCELLED"


class EventKind(str, Enum):
    PAYMENT = "Payment"
    REFUND = "Refund"
    REVERSAL = "Reversal"


class TransactionStatus(str, Enum):
    APPROVED = "Approved"
    INCORRECT_PIN = "IncorrectPin"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    INVALID_AMOUNT = "InvalidAmount"
    PIN_ENTRY_TRIES_EXCEEDED = "PinEntryTriesExceeded"
    INCORRECT_SECURITY_CODE = "IncorrectSecurityCode"
    REVERSAL = "Reversal"
    PARTIAL_REVERSAL = "PartialReversal"
    OTHER = "Other"


class PersonalizationSource(str, Enum):
    KYC = "KYC"
    ENS = "ENS"


# Auth

class VerifyChallengeRequest(BaseModel):
    message: str = Field(..., description="SIWE message that was signed")
    signature: str = Field(..., description="Wallet signature of the message")
    ttlInSeconds: Optional[int] = Field(None, ge=60, le=86400, description="Token lifetime")


class SignupRequest(BaseModel):
    authEmail: EmailStr
    otp: Optional[str] = Field(None, min_length=6, max_length=6)
    referralCouponCode: Optional[str] = None
    marketingCampaign: Optional[str] = None
    partnerId: Optional[str] = None


class SignupOtpRequest(BaseModel):
    email: EmailStr


# User

class UpdateUserRequest(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    postalCode: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class PhoneRequest(BaseModel):
    phone: str


class PhoneOtpRequest(BaseModel):
    otp: str


class AcceptTermsRequest(BaseModel):
    type: str
    version: str


# Accounts and Safe

class DailyLimitRequest(BaseModel):
    newLimit: str
    signature: str


class WithdrawRequest(BaseModel):
    tokenAddress: str
    to: str
    amount: str
    signature: str


class EoaAccountRequest(BaseModel):
    address: str
    message: str
    signature: str


class CreateSafeRequest(BaseModel):
    chainId: int = Field(100, description="Gnosis Chain")


class SignatureRequest(BaseModel):
    signature: str


class SetCurrencyRequest(BaseModel):
    currency: str


class SafeTransactionRequest(BaseModel):
    to: str
    value: str
    data: Optional[str] = None


class AddOwnerRequest(BaseModel):
    newOwner: str
    signature: str


class RemoveOwnerRequest(BaseModel):
    ownerToRemove: str
    signature: str


# Card orders

class CreatePhysicalCardOrderRequest(BaseModel):
    personalizationSource: PersonalizationSource
    embossedName: Optional[str] = None
    address1: str
    address2: Optional[str] = None
    city: str
    country: str
    postalCode: str
    state: Optional[str] = None
    couponCode: Optional[str] = None


class ConfirmCardOrderRequest(BaseModel):
    confirmation: str


class CouponRequest(BaseModel):
    couponCode: str


class AttachTransactionRequest(BaseModel):
    transactionHash: str


# KYC, verification, IBAN

class KycAnswer(BaseModel):
    question: str
    answer: str


class KycAnswersRequest(BaseModel):
    answers: List[KycAnswer]


class ImportApplicantRequest(BaseModel):
    applicantId: str


class VerificationRequest(BaseModel):
    phoneNumber: str


class VerificationCheckRequest(BaseModel):
    code: str


class MoneriumIntegrationRequest(BaseModel):
    signature: str
    accounts: List[Dict[str, Any]]


class CallbackUrlRequest(BaseModel):
    callbackUrl: str


# Rewards, transactions, webhooks

class AcceptRewardsTermsRequest(BaseModel):
    version: str
    accepted: bool


class DisputeRequest(BaseModel):
    reason: str
    description: Optional[str] = None


class CreateWebhookRequest(BaseModel):
    url: str
    events: List[str]
    description: Optional[str] = None


class UpdateWebhookRequest(BaseModel):
    url: Optional[str] = None
    events: Optional[List[str]] = None
    description: Optional[str] = None
    isActive: Optional[bool] = None


class SubscribeWebhookRequest(BaseModel):
    url: str
    signature: str
    events: List[str]


# Local accounts

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: Optional[str] = None
    role: Optional[Role] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UpdateLocalUserRequest(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)


class ChangeRoleRequest(BaseModel):
    role: Role


# Notifications

class TestSmsRequest(BaseModel):
    to: str = Field(..., pattern=PHONE_PATTERN)
    message: str
    language: Optional[str] = None


class OtpSmsRequest(BaseModel):
    to: str = Field(..., pattern=PHONE_PATTERN)
    code: str
    purpose: OtpPurpose = OtpPurpose.GENERIC
    language: Optional[str] = None


class SendExampleEmailRequest(BaseModel):
    to: EmailStr
    name: str
    language: Optional[str] = None


class SendEmailRequest(BaseModel):
    to: EmailStr
    template: str
    language: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)
