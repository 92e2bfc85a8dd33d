# Creates every table and seeds the lookup rows the booking flow needs.
from sqlalchemy import select

from skincare_app.extensions import db
from skincare_app.models import PAYMENT_METHODS, Base, PaymentMethod, Slot
from main import create_app

DEFAULT_SLOTS = [
    (1, "08:00", "09:00"),
    (2, "09:00", "10:00"),
    (3, "10:00", "11:00"),
    (4, "13:00", "14:00"),
    (5, "14:00", "15:00"),
    (6, "15:00", "16:00"),
]


def seed(session):
    for method in PAYMENT_METHODS:
        if not session.scalar(select(PaymentMethod).where(PaymentMethod.method == method)):
            session.add(PaymentMethod(method=method, is_active=True))

    if not session.scalar(select(Slot)):
        for slot_num, start_time, end_time in DEFAULT_SLOTS:
            session.add(Slot(slot_num=slot_num, start_time=start_time, end_time=end_time))

    session.commit()


if __name__ == "__main__":
    app = create_app()

    with app.app_context():
        Base.metadata.create_all(bind=db.engine)
        seed(db.session)

    print("Database tables created and seeded successfully!")
