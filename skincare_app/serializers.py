# Persisted rows -> camelCase JSON dicts
from .utils.responses import iso


def serialize_account(account):
    if account is None:
        return None
    return {
        "id": account.id,
        "username": account.username,
        "email": account.email,
        "role": account.role,
        "dob": iso(account.dob),
        "phone": account.phone,
        "isActive": account.is_active,
        "createdAt": iso(account.created_at),
        "updatedAt": iso(account.updated_at),
    }


def serialize_account_brief(account):
    if account is None:
        return None
    return {"id": account.id, "username": account.username, "email": account.email}


def serialize_service(service):
    if service is None:
        return None
    return {
        "id": service.id,
        "serviceName": service.service_name,
        "description": service.description,
        "price": float(service.price) if service.price is not None else None,
        "isActive": service.is_active,
        "image": service.image,
    }


def serialize_therapist(therapist, expand_account=False):
    if therapist is None:
        return None
    data = {
        "id": therapist.id,
        "accountId": therapist.account_id,
        "specialization": [serialize_service(s) for s in therapist.specialization],
        "certification": therapist.certification or [],
        "experience": therapist.experience,
    }
    if expand_account:
        data["account"] = serialize_account(therapist.account)
    return data


def serialize_slot(slot):
    if slot is None:
        return None
    return {
        "id": slot.id,
        "slotNum": slot.slot_num,
        "startTime": slot.start_time,
        "endTime": slot.end_time,
    }


def serialize_appointment(appointment):
    if appointment is None:
        return None
    return {
        "id": appointment.id,
        "therapistId": appointment.therapist_id,
        "customerId": appointment.customer_id,
        "serviceId": appointment.service_id,
        "slotsId": appointment.slot_id,
        "checkInImage": appointment.check_in_image,
        "checkOutImage": appointment.check_out_image,
        "notes": appointment.notes,
        "amount": float(appointment.amount) if appointment.amount is not None else None,
        "status": appointment.status,
        "createdAt": iso(appointment.created_at),
        "updatedAt": iso(appointment.updated_at),
    }


def serialize_shift(shift):
    return {
        "id": shift.id,
        "slotsId": shift.slot_id,
        "appointmentId": shift.appointment_id,
        "therapistId": shift.therapist_id,
        "date": iso(shift.date),
        "isAvailable": shift.is_available,
    }


def serialize_transaction(transaction):
    return {
        "id": transaction.id,
        "customerId": transaction.customer_id,
        "appointmentId": transaction.appointment_id,
        "paymentMethod": transaction.payment_method,
        "status": transaction.status,
        "createdAt": iso(transaction.created_at),
        "updatedAt": iso(transaction.updated_at),
    }


def serialize_payment_method(method):
    return {"id": method.id, "method": method.method, "isActive": method.is_active}


def serialize_feedback(feedback):
    return {
        "id": feedback.id,
        "accountId": feedback.account_id,
        "appointmentId": feedback.appointment_id,
        "serviceId": feedback.service_id,
        "therapistId": feedback.therapist_id,
        "comment": feedback.comment,
        "rating": feedback.rating,
        "images": feedback.images,
        "createdAt": iso(feedback.created_at),
        "updatedAt": iso(feedback.updated_at),
    }


def serialize_blog(blog):
    return {
        "id": blog.id,
        "staffId": blog.staff_id,
        "title": blog.title,
        "status": blog.status,
        "content": blog.content,
        "imageId": blog.images or [],
        "createdAt": iso(blog.created_at),
        "updatedAt": iso(blog.updated_at),
    }


def serialize_question(question):
    return {"id": question.id, "title": question.title, "answers": question.answers or []}


def serialize_roadmap(roadmap):
    if roadmap is None:
        return None
    return {
        "id": roadmap.id,
        "serviceId": [s.id for s in roadmap.services],
        "services": [serialize_service(s) for s in roadmap.services],
        "estimate": roadmap.estimate,
    }


def serialize_scoreband(scoreband, expand_roadmap=False):
    if scoreband is None:
        return None
    data = {
        "id": scoreband.id,
        "roadmapId": scoreband.roadmap_id,
        "minPoint": scoreband.min_point,
        "maxPoint": scoreband.max_point,
        "typeOfSkin": scoreband.type_of_skin,
        "skinExplanation": scoreband.skin_explanation,
    }
    if expand_roadmap:
        data["roadmap"] = serialize_roadmap(scoreband.roadmap)
    return data


def serialize_user_quiz(user_quiz, expand=False):
    data = {
        "id": user_quiz.id,
        "accountId": user_quiz.account_id,
        "scoreBandId": user_quiz.scoreband_id,
        "result": user_quiz.result or [],
        "totalPoint": user_quiz.total_point,
        "createdAt": iso(user_quiz.created_at),
        "updatedAt": iso(user_quiz.updated_at),
    }
    if expand:
        data["account"] = serialize_account_brief(user_quiz.account)
        data["scoreband"] = serialize_scoreband(user_quiz.scoreband, expand_roadmap=True)
    return data
