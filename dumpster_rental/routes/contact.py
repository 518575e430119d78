import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..email_service import send_contact_email
from ..rate_limiter import create_rate_limiter
from ..shared.validators import validate_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Contact"])

rate_limit_contact = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="contact")


class ContactRequest(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None


@router.post("/contact")
async def submit_contact_form(data: ContactRequest, _: None = Depends(rate_limit_contact)):
    """Forward a website contact form to the business inbox"""
    if not (data.firstName and data.lastName and data.email and data.message):
        raise HTTPException(status_code=400, detail="Missing required fields")
    try:
        email = validate_email(data.email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        result = await send_contact_email(
            first_name=data.firstName,
            last_name=data.lastName,
            email=email,
            phone=data.phone,
            message=data.message,
        )
    except Exception as e:
        logger.error(f"❌ Contact form email failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to send message") from e

    if result.get("skipped"):
        logger.warning(f"⚠️ Contact email skipped: {result.get('reason')}")
        return {"success": True, "skipped": True, "message": result.get("reason") or "Email not configured"}

    logger.info(f"📨 Contact form sent for {email}")
    return {"success": True, "message": "Message sent successfully"}
