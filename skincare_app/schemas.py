import datetime
import re
from typing import Annotated, ClassVar, FrozenSet, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

Id = Annotated[int, Field(gt=0)]
NonEmptyStr = Annotated[str, Field(min_length=1)]
StrippedStr = Annotated[str, StringConstraints(strip_whitespace=True)]
StrippedNonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

Role = Literal["Admin", "Staff", "Therapist", "Customer"]
AppointmentStatus = Literal["Scheduled", "CheckedIn", "Completed", "Cancelled"]
PaymentMethodName = Literal["Cash", "VNPay"]
TransactionStatus = Literal["pending", "completed", "failed"]
QuizAnswer = Literal["Never", "Sometimes", "Often"]

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RequestSchema(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    # optional columns that an explicit null is allowed to clear
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.nullable_fields:
                field = type(self).model_fields[name]
                raise ValueError(f"{field.alias or name} cannot be null")
        return self


def parse_dob(value):
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value))
    except ValueError:
        raise ValueError("Invalid date of birth format. Use YYYY-MM-DD.")


def check_dob_bounds(dob):
    today = datetime.date.today()
    if dob > today:
        raise ValueError("Date of Birth cannot be in the future")
    if dob.year < today.year - 120:
        raise ValueError("Date of Birth cannot be more than 120 years in the past")
    return dob


# --- Account ---------------------------------------------------------------


class AccountFields(RequestSchema):
    @field_validator("email", check_fields=False)
    @classmethod
    def email_format(cls, v):
        if v is not None and not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("password", check_fields=False)
    @classmethod
    def password_length(cls, v):
        if v is not None and len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("dob", mode="before", check_fields=False)
    @classmethod
    def dob_format(cls, v):
        if v is None:
            return v
        return check_dob_bounds(parse_dob(v))

    @field_validator("phone", check_fields=False)
    @classmethod
    def phone_length(cls, v):
        if v is not None and len(v) < 10:
            raise ValueError("Phone number must be at least 10 digits")
        return v


class RegisterRequest(AccountFields):
    # passwords are hashed exactly as typed
    model_config = ConfigDict(str_strip_whitespace=False)

    username: StrippedNonEmptyStr
    email: StrippedStr
    password: str
    dob: datetime.date
    phone: StrippedStr

    @model_validator(mode="before")
    @classmethod
    def require_all(cls, data):
        if isinstance(data, dict):
            required = ("username", "email", "password", "dob", "phone")
            if any(not data.get(key) for key in required):
                raise ValueError(
                    "Please enter all required fields "
                    "(username, email, password, date of birth, phone number)"
                )
        return data


class AccountCreateRequest(RegisterRequest):
    role: Role


class ProfileUpdateRequest(AccountFields):
    username: Optional[NonEmptyStr] = None
    email: Optional[str] = None
    dob: Optional[datetime.date] = None
    phone: Optional[str] = None


class AccountAdminUpdateRequest(ProfileUpdateRequest):
    role: Optional[Role] = None
    is_active: Optional[bool] = None


class LoginRequest(RequestSchema):
    model_config = ConfigDict(str_strip_whitespace=False)

    email: StrippedStr
    password: str

    @model_validator(mode="before")
    @classmethod
    def require_credentials(cls, data):
        if isinstance(data, dict) and (not data.get("email") or not data.get("password")):
            raise ValueError("Email and password are required")
        return data


class ChangePasswordRequest(RequestSchema):
    model_config = ConfigDict(str_strip_whitespace=False)

    current_password: str
    new_password: str

    @model_validator(mode="before")
    @classmethod
    def require_both(cls, data):
        if isinstance(data, dict) and (
            not data.get("currentPassword") or not data.get("newPassword")
        ):
            raise ValueError("Current password and new password are required")
        return data


# --- Catalog ---------------------------------------------------------------


class ServiceCreateRequest(RequestSchema):
    nullable_fields = frozenset({"image"})

    service_name: NonEmptyStr
    description: NonEmptyStr
    price: float = Field(gt=0)
    is_active: bool = True
    image: Optional[str] = None


class ServiceUpdateRequest(RequestSchema):
    nullable_fields = frozenset({"image"})

    service_name: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    price: Optional[float] = Field(default=None, gt=0)
    is_active: Optional[bool] = None
    image: Optional[str] = None


class Certification(RequestSchema):
    name: str
    issued_by: str
    issued_date: datetime.date

    @field_validator("name")
    @classmethod
    def name_letters(cls, v):
        if not v:
            raise ValueError("Certification name is required")
        if not re.fullmatch(r"[a-zA-Z\s]+", v):
            raise ValueError("Certification name must only contain letters and spaces")
        return v

    @field_validator("issued_by")
    @classmethod
    def issuer_alnum(cls, v):
        if not v:
            raise ValueError("Certification issuer is required")
        if not re.fullmatch(r"[a-zA-Z0-9\s]+", v):
            raise ValueError("Certification issuer must not contain special characters")
        return v

    @field_validator("issued_date", mode="before")
    @classmethod
    def issued_date_iso(cls, v):
        try:
            return datetime.date.fromisoformat(str(v))
        except ValueError:
            raise ValueError("Invalid issued date format")


def _non_empty(v, message):
    if v is not None and len(v) == 0:
        raise ValueError(message)
    return v


class TherapistCreateRequest(RequestSchema):
    account_id: Id
    specialization: List[Id]
    certification: List[Certification]
    experience: NonEmptyStr

    @field_validator("specialization")
    @classmethod
    def specialization_not_empty(cls, v):
        return _non_empty(v, "Specialization must be a non-empty array")

    @field_validator("certification")
    @classmethod
    def certification_not_empty(cls, v):
        return _non_empty(v, "Certification must be a non-empty array")


class TherapistUpdateRequest(RequestSchema):
    specialization: Optional[List[Id]] = None
    certification: Optional[List[Certification]] = None
    experience: Optional[NonEmptyStr] = None

    @model_validator(mode="before")
    @classmethod
    def account_is_immutable(cls, data):
        if isinstance(data, dict) and ("accountId" in data or "account_id" in data):
            raise ValueError("Cannot update accountId")
        return data

    @field_validator("specialization")
    @classmethod
    def specialization_not_empty(cls, v):
        return _non_empty(v, "Specialization must be a non-empty array")

    @field_validator("certification")
    @classmethod
    def certification_not_empty(cls, v):
        return _non_empty(v, "Certification must be a non-empty array")


# --- Scheduling ------------------------------------------------------------


class SlotCreateRequest(RequestSchema):
    slot_num: int = Field(gt=0)
    start_time: NonEmptyStr
    end_time: NonEmptyStr


class SlotUpdateRequest(RequestSchema):
    slot_num: Optional[int] = Field(default=None, gt=0)
    start_time: Optional[NonEmptyStr] = None
    end_time: Optional[NonEmptyStr] = None


class ShiftCreateRequest(RequestSchema):
    slot_id: Id = Field(alias="slotsId")
    appointment_id: Id
    therapist_id: Id
    date: datetime.date
    is_available: bool = True


class ShiftUpdateRequest(RequestSchema):
    slot_id: Optional[Id] = Field(default=None, alias="slotsId")
    appointment_id: Optional[Id] = None
    therapist_id: Optional[Id] = None
    date: Optional[datetime.date] = None
    is_available: Optional[bool] = None


class AppointmentCreateRequest(RequestSchema):
    nullable_fields = frozenset({"notes"})

    therapist_id: Id
    slot_id: Id = Field(alias="slotsId")
    service_id: Id
    notes: Optional[str] = None


class AppointmentUpdateRequest(RequestSchema):
    nullable_fields = frozenset({"notes"})

    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class BookingRequest(AppointmentCreateRequest):
    payment_method: PaymentMethodName
    date: datetime.date


class TransactionUpdateRequest(RequestSchema):
    customer_id: Optional[Id] = None
    appointment_id: Optional[Id] = None
    payment_method: Optional[PaymentMethodName] = None
    status: TransactionStatus


class PaymentMethodRequest(RequestSchema):
    method: NonEmptyStr
    is_active: bool = True


class PaymentMethodUpdateRequest(RequestSchema):
    method: Optional[NonEmptyStr] = None
    is_active: Optional[bool] = None


# --- Content ---------------------------------------------------------------


class FeedbackCreateRequest(RequestSchema):
    nullable_fields = frozenset({"images"})

    appointment_id: Id
    service_id: Id
    therapist_id: Id
    comment: NonEmptyStr
    rating: int = Field(ge=1, le=5)
    images: Optional[str] = None


class FeedbackUpdateRequest(RequestSchema):
    nullable_fields = frozenset({"images"})

    comment: Optional[NonEmptyStr] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    images: Optional[str] = None


class BlogImage(RequestSchema):
    image: NonEmptyStr
    image_description: NonEmptyStr


class BlogCreateRequest(RequestSchema):
    title: NonEmptyStr
    status: NonEmptyStr
    content: NonEmptyStr
    images: List[BlogImage] = Field(default_factory=list, alias="imageId")


class BlogUpdateRequest(RequestSchema):
    title: Optional[NonEmptyStr] = None
    status: Optional[NonEmptyStr] = None
    content: Optional[NonEmptyStr] = None
    images: Optional[List[BlogImage]] = Field(default=None, alias="imageId")


# --- Quiz ------------------------------------------------------------------


class AnswerOption(RequestSchema):
    title: NonEmptyStr
    point: int


class QuestionRequest(RequestSchema):
    title: NonEmptyStr
    answers: List[AnswerOption] = Field(default_factory=list)


class QuestionUpdateRequest(RequestSchema):
    title: Optional[NonEmptyStr] = None
    answers: Optional[List[AnswerOption]] = None


class RoadmapRequest(RequestSchema):
    services: List[Id] = Field(alias="serviceId", min_length=1)
    estimate: NonEmptyStr


class RoadmapUpdateRequest(RequestSchema):
    services: Optional[List[Id]] = Field(default=None, alias="serviceId", min_length=1)
    estimate: Optional[NonEmptyStr] = None


class ScorebandRequest(RequestSchema):
    roadmap_id: Id
    min_point: int
    max_point: int
    type_of_skin: NonEmptyStr
    skin_explanation: NonEmptyStr


class ScorebandUpdateRequest(RequestSchema):
    roadmap_id: Optional[Id] = None
    min_point: Optional[int] = None
    max_point: Optional[int] = None
    type_of_skin: Optional[NonEmptyStr] = None
    skin_explanation: Optional[NonEmptyStr] = None


class QuizResultItem(RequestSchema):
    title: NonEmptyStr
    answer: QuizAnswer
    point: int


class UserQuizCreateRequest(RequestSchema):
    account_id: Id
    scoreband_id: Id = Field(alias="scoreBandId")
    result: List[QuizResultItem] = Field(min_length=1)
    total_point: int


class UserQuizUpdateRequest(RequestSchema):
    result: Optional[List[QuizResultItem]] = Field(default=None, min_length=1)
    total_point: Optional[int] = None


class QuizSubmissionAnswer(RequestSchema):
    question_id: Id
    answer: NonEmptyStr


class QuizSubmissionRequest(RequestSchema):
    answers: List[QuizSubmissionAnswer] = Field(min_length=1)
