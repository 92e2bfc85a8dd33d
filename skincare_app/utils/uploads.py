# Image uploads for feedback and appointment check-in/check-out
import os
import re
import time
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from .errors import BadRequest
from .s3_utils import upload_file_to_s3

IMAGE_PATTERN = re.compile(r"jpeg|jpg|png")


def is_allowed_image(file):
    """Both the extension and the declared MIME type must look like jpeg/jpg/png."""
    ext = os.path.splitext(file.filename or "")[1].lower()
    return bool(IMAGE_PATTERN.search(ext)) and bool(
        IMAGE_PATTERN.search(file.mimetype or "")
    )


def save_image(file, folder):
    """Store an uploaded image and return the URL it is served from."""
    if not is_allowed_image(file):
        raise BadRequest("Only accept image file (jpeg, jpg, png)")

    filename = secure_filename(file.filename)

    bucket_name = current_app.config.get("S3_BUCKET_NAME")
    if bucket_name:
        return upload_file_to_s3(
            file,
            f"{folder}/{uuid.uuid4()}_{filename}",
            bucket_name,
            region=current_app.config.get("S3_REGION"),
            base_url=current_app.config.get("S3_BASE_URL"),
        )

    upload_folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_folder, exist_ok=True)
    stored_name = f"{int(time.time() * 1000)}-{filename}"
    file.save(os.path.join(upload_folder, stored_name))
    current_app.logger.info(f"Stored upload {stored_name}")
    return f"/images/{stored_name}"
