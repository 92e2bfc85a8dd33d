import os

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from .errors import InternalServerError


def _client(region):
    return boto3.client(
        "s3",
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        region_name=region,
    )


def upload_file_to_s3(file, filename, bucket_name, region=None, base_url=None):
    s3 = _client(region)
    try:
        s3.upload_fileobj(
            file,
            bucket_name,
            filename,
            ExtraArgs={"ACL": "public-read", "ContentType": file.mimetype},
        )
    except NoCredentialsError as e:
        raise InternalServerError(
            "AWS credentials not found. Check environment variables."
        ) from e
    except (BotoCoreError, ClientError) as e:
        raise InternalServerError("File upload failed") from e

    base_url = base_url or f"https://{bucket_name}.s3.amazonaws.com"
    return f"{base_url}/{filename}"
