from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DECIMAL,
    Date,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    JSON,
    String,
    Table,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()
metadata = Base.metadata

ROLE_ADMIN = "Admin"
ROLE_STAFF = "Staff"
ROLE_THERAPIST = "Therapist"
ROLE_CUSTOMER = "Customer"
ACCOUNT_ROLES = (ROLE_ADMIN, ROLE_STAFF, ROLE_THERAPIST, ROLE_CUSTOMER)

APPOINTMENT_STATUSES = ("Scheduled", "CheckedIn", "Completed", "Cancelled")
PAYMENT_METHODS = ("Cash", "VNPay")
TRANSACTION_STATUSES = ("pending", "completed", "failed")
QUIZ_ANSWERS = ("Never", "Sometimes", "Often")


def _created_at():
    return mapped_column(
        DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )


def _updated_at():
    return mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=func.now(),
    )


class Account(Base):
    __tablename__ = "account"
    __table_args__ = (
        Index("account_username_unique", "username", unique=True),
        Index("account_email_unique", "email", unique=True),
    )

    id = mapped_column(Integer, primary_key=True)
    username = mapped_column(String(100), nullable=False)
    password_hash = mapped_column(String(255), nullable=False)
    email = mapped_column(String(255), nullable=False)
    role = mapped_column(
        Enum(*ACCOUNT_ROLES, name="account_role"),
        nullable=False,
        default=ROLE_CUSTOMER,
    )
    dob = mapped_column(Date, nullable=False)
    phone = mapped_column(String(20), nullable=False)
    is_active = mapped_column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()

    therapist: Mapped[Optional["Therapist"]] = relationship(
        "Therapist",
        uselist=False,
        back_populates="account",
        passive_deletes="all",
    )
    blogs: Mapped[List["Blog"]] = relationship(
        "Blog",
        uselist=True,
        back_populates="staff",
        passive_deletes="all",
    )
    feedbacks: Mapped[List["Feedback"]] = relationship(
        "Feedback",
        uselist=True,
        back_populates="account",
        passive_deletes="all",
    )
    transactions: Mapped[List["Transaction"]] = relationship(
        "Transaction",
        uselist=True,
        back_populates="customer",
        passive_deletes="all",
    )
    user_quizzes: Mapped[List["UserQuiz"]] = relationship(
        "UserQuiz",
        uselist=True,
        back_populates="account",
        passive_deletes="all",
    )


class Service(Base):
    __tablename__ = "service"

    id = mapped_column(Integer, primary_key=True)
    service_name = mapped_column(String(255), nullable=False)
    description = mapped_column(Text, nullable=False)
    price = mapped_column(DECIMAL(10, 2, asdecimal=False), nullable=False)
    is_active = mapped_column(Boolean, nullable=False, default=True)
    image = mapped_column(String(512))

    therapists: Mapped[List["Therapist"]] = relationship(
        "Therapist", secondary="therapist_specialization", back_populates="specialization"
    )
    roadmaps: Mapped[List["Roadmap"]] = relationship(
        "Roadmap", secondary="roadmap_service", back_populates="services"
    )
    feedbacks: Mapped[List["Feedback"]] = relationship(
        "Feedback",
        uselist=True,
        back_populates="service",
        passive_deletes="all",
    )


t_therapist_specialization = Table(
    "therapist_specialization",
    metadata,
    Column("therapist_id", Integer, primary_key=True, nullable=False),
    Column("service_id", Integer, primary_key=True, nullable=False),
    ForeignKeyConstraint(
        ["therapist_id"],
        ["therapist.id"],
        ondelete="CASCADE",
        name="fk_specialization_therapist",
    ),
    ForeignKeyConstraint(
        ["service_id"],
        ["service.id"],
        ondelete="CASCADE",
        name="fk_specialization_service",
    ),
    Index("idx_specialization_service", "service_id"),
)


class Therapist(Base):
    __tablename__ = "therapist"
    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id"], ["account.id"], name="fk_therapist_account"
        ),
        Index("therapist_account_unique", "account_id", unique=True),
    )

    id = mapped_column(Integer, primary_key=True)
    account_id = mapped_column(Integer, nullable=False)
    # list of {name, issuedBy, issuedDate}
    certification = mapped_column(JSON, nullable=False, default=list)
    experience = mapped_column(String(255), nullable=False)

    account: Mapped["Account"] = relationship("Account", back_populates="therapist")
    specialization: Mapped[List["Service"]] = relationship(
        "Service", secondary="therapist_specialization", back_populates="therapists"
    )
    shifts: Mapped[List["Shift"]] = relationship(
        "Shift",
        uselist=True,
        back_populates="therapist",
        passive_deletes="all",
    )
    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment",
        uselist=True,
        back_populates="therapist",
        passive_deletes="all",
    )


class Slot(Base):
    __tablename__ = "slot"

    id = mapped_column(Integer, primary_key=True)
    slot_num = mapped_column(Integer, nullable=False)
    start_time = mapped_column(String(20), nullable=False)
    end_time = mapped_column(String(20), nullable=False)

    shifts: Mapped[List["Shift"]] = relationship(
        "Shift",
        uselist=True,
        back_populates="slot",
        passive_deletes="all",
    )


class Appointment(Base):
    __tablename__ = "appointment"
    __table_args__ = (
        ForeignKeyConstraint(
            ["therapist_id"], ["therapist.id"], name="fk_ap_therapist"
        ),
        ForeignKeyConstraint(["customer_id"], ["account.id"], name="fk_ap_customer"),
        ForeignKeyConstraint(["service_id"], ["service.id"], name="fk_ap_service"),
        ForeignKeyConstraint(["slot_id"], ["slot.id"], name="fk_ap_slot"),
        Index("idx_ap_customer", "customer_id"),
        Index("idx_ap_therapist", "therapist_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    therapist_id = mapped_column(Integer, nullable=False)
    customer_id = mapped_column(Integer, nullable=False)
    service_id = mapped_column(Integer, nullable=False)
    slot_id = mapped_column(Integer, nullable=False)
    check_in_image = mapped_column(String(512))
    check_out_image = mapped_column(String(512))
    notes = mapped_column(Text)
    amount = mapped_column(DECIMAL(10, 2, asdecimal=False), nullable=False)
    status = mapped_column(
        Enum(*APPOINTMENT_STATUSES, name="appointment_status"), nullable=False
    )
    created_at = _created_at()
    updated_at = _updated_at()

    therapist: Mapped["Therapist"] = relationship(
        "Therapist", back_populates="appointments"
    )
    customer: Mapped["Account"] = relationship("Account")
    service: Mapped["Service"] = relationship("Service")
    slot: Mapped["Slot"] = relationship("Slot")
    shifts: Mapped[List["Shift"]] = relationship(
        "Shift",
        uselist=True,
        back_populates="appointment",
        passive_deletes="all",
    )


class Shift(Base):
    __tablename__ = "shift"
    __table_args__ = (
        ForeignKeyConstraint(["slot_id"], ["slot.id"], name="fk_shift_slot"),
        ForeignKeyConstraint(
            ["appointment_id"], ["appointment.id"], name="fk_shift_appointment"
        ),
        ForeignKeyConstraint(
            ["therapist_id"], ["therapist.id"], name="fk_shift_therapist"
        ),
        # not unique: the same therapist/slot/date may be booked more than once
        Index("idx_shift_therapist_date", "therapist_id", "date"),
    )

    id = mapped_column(Integer, primary_key=True)
    slot_id = mapped_column(Integer, nullable=False)
    appointment_id = mapped_column(Integer, nullable=False)
    therapist_id = mapped_column(Integer, nullable=False)
    date = mapped_column(Date, nullable=False)
    is_available = mapped_column(Boolean, nullable=False, default=True)

    slot: Mapped["Slot"] = relationship("Slot", back_populates="shifts")
    appointment: Mapped["Appointment"] = relationship(
        "Appointment", back_populates="shifts"
    )
    therapist: Mapped["Therapist"] = relationship("Therapist", back_populates="shifts")


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        ForeignKeyConstraint(["customer_id"], ["account.id"], name="fk_tx_customer"),
        ForeignKeyConstraint(
            ["appointment_id"], ["appointment.id"], name="fk_tx_appointment"
        ),
        Index("idx_tx_customer", "customer_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    customer_id = mapped_column(Integer, nullable=False)
    appointment_id = mapped_column(Integer, nullable=False)
    payment_method = mapped_column(
        Enum(*PAYMENT_METHODS, name="payment_method"), nullable=False
    )
    status = mapped_column(
        Enum(*TRANSACTION_STATUSES, name="transaction_status"), nullable=False
    )
    created_at = _created_at()
    updated_at = _updated_at()

    customer: Mapped["Account"] = relationship("Account", back_populates="transactions")
    appointment: Mapped["Appointment"] = relationship("Appointment")


class PaymentMethod(Base):
    __tablename__ = "payment_method"

    id = mapped_column(Integer, primary_key=True)
    method = mapped_column(String(50), nullable=False)
    is_active = mapped_column(Boolean, nullable=False, default=True)


class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = (
        ForeignKeyConstraint(["account_id"], ["account.id"], name="fk_fb_account"),
        ForeignKeyConstraint(
            ["appointment_id"], ["appointment.id"], name="fk_fb_appointment"
        ),
        ForeignKeyConstraint(["service_id"], ["service.id"], name="fk_fb_service"),
        ForeignKeyConstraint(
            ["therapist_id"], ["therapist.id"], name="fk_fb_therapist"
        ),
        Index("idx_fb_service", "service_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    account_id = mapped_column(Integer, nullable=False)
    appointment_id = mapped_column(Integer, nullable=False)
    service_id = mapped_column(Integer, nullable=False)
    therapist_id = mapped_column(Integer, nullable=False)
    comment = mapped_column(Text, nullable=False)
    rating = mapped_column(Integer, nullable=False)
    images = mapped_column(String(512))
    created_at = _created_at()
    updated_at = _updated_at()

    account: Mapped["Account"] = relationship("Account", back_populates="feedbacks")
    service: Mapped["Service"] = relationship("Service", back_populates="feedbacks")
    therapist: Mapped["Therapist"] = relationship("Therapist")


class Blog(Base):
    __tablename__ = "blog"
    __table_args__ = (
        ForeignKeyConstraint(["staff_id"], ["account.id"], name="fk_blog_staff"),
    )

    id = mapped_column(Integer, primary_key=True)
    staff_id = mapped_column(Integer, nullable=False)
    title = mapped_column(String(255), nullable=False)
    status = mapped_column(String(50), nullable=False)
    content = mapped_column(Text, nullable=False)
    # list of {image, imageDescription}
    images = mapped_column(JSON, nullable=False, default=list)
    created_at = _created_at()
    updated_at = _updated_at()

    staff: Mapped["Account"] = relationship("Account", back_populates="blogs")


class Question(Base):
    __tablename__ = "question"

    id = mapped_column(Integer, primary_key=True)
    title = mapped_column(String(512), nullable=False)
    # list of {title, point}
    answers = mapped_column(JSON, nullable=False, default=list)


t_roadmap_service = Table(
    "roadmap_service",
    metadata,
    Column("roadmap_id", Integer, primary_key=True, nullable=False),
    Column("service_id", Integer, primary_key=True, nullable=False),
    ForeignKeyConstraint(
        ["roadmap_id"], ["roadmap.id"], ondelete="CASCADE", name="fk_rs_roadmap"
    ),
    ForeignKeyConstraint(
        ["service_id"], ["service.id"], ondelete="CASCADE", name="fk_rs_service"
    ),
    Index("idx_rs_service", "service_id"),
)


class Roadmap(Base):
    __tablename__ = "roadmap"

    id = mapped_column(Integer, primary_key=True)
    estimate = mapped_column(String(255), nullable=False)

    services: Mapped[List["Service"]] = relationship(
        "Service", secondary="roadmap_service", back_populates="roadmaps"
    )
    scorebands: Mapped[List["Scoreband"]] = relationship(
        "Scoreband",
        uselist=True,
        back_populates="roadmap",
        passive_deletes="all",
    )


class Scoreband(Base):
    __tablename__ = "scoreband"
    __table_args__ = (
        ForeignKeyConstraint(["roadmap_id"], ["roadmap.id"], name="fk_sb_roadmap"),
    )

    id = mapped_column(Integer, primary_key=True)
    roadmap_id = mapped_column(Integer, nullable=False)
    min_point = mapped_column(Integer, nullable=False)
    max_point = mapped_column(Integer, nullable=False)
    type_of_skin = mapped_column(String(100), nullable=False)
    skin_explanation = mapped_column(Text, nullable=False)

    roadmap: Mapped["Roadmap"] = relationship("Roadmap", back_populates="scorebands")


class UserQuiz(Base):
    __tablename__ = "user_quiz"
    __table_args__ = (
        ForeignKeyConstraint(["account_id"], ["account.id"], name="fk_uq_account"),
        ForeignKeyConstraint(
            ["scoreband_id"], ["scoreband.id"], name="fk_uq_scoreband"
        ),
        Index("idx_uq_account", "account_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    account_id = mapped_column(Integer, nullable=False)
    scoreband_id = mapped_column(Integer, nullable=False)
    # list of {title, answer, point}
    result = mapped_column(JSON, nullable=False, default=list)
    total_point = mapped_column(Integer, nullable=False)
    created_at = _created_at()
    updated_at = _updated_at()

    account: Mapped["Account"] = relationship("Account", back_populates="user_quizzes")
    scoreband: Mapped["Scoreband"] = relationship("Scoreband")
