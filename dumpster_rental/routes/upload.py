import base64
import logging
import time
import uuid
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..config import R2_ACCESS_KEY_ID, R2_ACCOUNT_ID, R2_BUCKET_NAME, R2_SECRET_ACCESS_KEY
from ..rate_limiter import create_rate_limiter
from ..shared.validators import extract_base64_from_data_url, get_base64_size, is_valid_base64

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Signatures"])

__all__ = ["router", "get_r2_client", "generate_presigned_url"]

# Presigned URL expiration time (7 days, the S3 maximum)
PRESIGNED_URL_EXPIRATION = 7 * 24 * 3600

MIN_SIGNATURE_LENGTH = 100
MAX_SIGNATURE_BYTES = 2 * 1024 * 1024  # 2MB

rate_limit_signatures = create_rate_limiter(limit=20, window_seconds=3600, key_prefix="signature")


class SignatureUpload(BaseModel):
    base64Data: Optional[str] = None
    bookingId: Optional[str] = None


class SignatureDelete(BaseModel):
    key: Optional[str] = None


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def generate_presigned_url(key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
    """Generate a presigned URL for accessing a private object in R2."""
    r2 = get_r2_client()
    try:
        url = r2.generate_presigned_url(
            "get_object",
            Params={
                "Bucket": R2_BUCKET_NAME,
                "Key": key,
                "ResponseContentType": "image/png",
                "ResponseContentDisposition": "inline",
            },
            ExpiresIn=expiration,
        )
        logger.info(f"✅ Generated presigned URL for key: {key}")
        return url
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        raise


def signature_key(booking_id: str) -> str:
    return f"signatures/{booking_id}/signature_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}.png"


@router.post("/upload-signature")
async def upload_signature(data: SignatureUpload, _: None = Depends(rate_limit_signatures)):
    """Store a drawn signature PNG (raw base64 or data URL) and return a link to it"""
    if not data.base64Data or not data.bookingId:
        raise HTTPException(
            status_code=400, detail="Missing required fields: base64Data and bookingId"
        )

    base64_data = extract_base64_from_data_url(data.base64Data)
    if len(base64_data) < MIN_SIGNATURE_LENGTH:
        raise HTTPException(status_code=400, detail="Signature data too small")
    if not is_valid_base64(base64_data):
        raise HTTPException(status_code=400, detail="Invalid signature data")
    if get_base64_size(base64_data) > MAX_SIGNATURE_BYTES:
        raise HTTPException(status_code=400, detail="Signature image too large")

    # Booking ids are UUIDs; anything else could escape the signatures/ prefix
    booking_id = data.bookingId.strip()
    if not booking_id.replace("-", "").isalnum() or len(booking_id) > 64:
        raise HTTPException(status_code=400, detail="Invalid booking ID")

    contents = base64.b64decode(base64_data)
    key = signature_key(booking_id)
    logger.info(f"📤 Uploading signature for booking {booking_id[:8]} ({len(contents)} bytes)")

    try:
        r2 = get_r2_client()
        r2.put_object(
            Bucket=R2_BUCKET_NAME,
            Key=key,
            Body=contents,
            ContentType="image/png",
        )
        url = generate_presigned_url(key)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Signature upload failed for booking {booking_id[:8]}: {e}")
        raise HTTPException(status_code=500, detail="Failed to upload signature") from e

    logger.info(f"✅ Signature uploaded: {key}")
    return {"success": True, "url": url, "key": key, "bytes": len(contents)}


@router.delete("/delete-signature")
async def delete_signature(data: SignatureDelete):
    if not data.key:
        raise HTTPException(status_code=400, detail="Missing required field: key")
    if not data.key.startswith("signatures/") or ".." in data.key:
        raise HTTPException(status_code=400, detail="Invalid signature key")

    try:
        r2 = get_r2_client()
        r2.delete_object(Bucket=R2_BUCKET_NAME, Key=data.key)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Signature deletion failed for {data.key}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete signature") from e

    logger.info(f"🗑️ Signature deleted: {data.key}")
    return {"success": True, "key": data.key}
