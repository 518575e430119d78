"""
Email delivery through SMTP (when configured) or Resend (fallback)
Templates are MJML, compiled to HTML right before sending
"""

import logging
import smtplib
import ssl
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import parseaddr
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from . import config
from .email_templates import (
    booking_confirmation_template,
    cancellation_template,
    contact_form_template,
    extension_template,
    guest_inquiry_template,
    new_booking_admin_template,
    payment_receipt_template,
    phone_booking_completed_template,
    phone_booking_payment_link_template,
    review_request_template,
)

logger = logging.getLogger(__name__)

SKIPPED = {"success": True, "skipped": True, "reason": "Email not configured"}


def smtp_configured() -> bool:
    return bool(config.SMTP_HOST and config.SMTP_USER and config.SMTP_PASS)


def email_configured() -> bool:
    return smtp_configured() or bool(config.RESEND_API_KEY)


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"❌ MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e

    # mjml_to_html returns a mapping with 'html' and 'errors' keys
    if isinstance(result, dict):
        if result.get("errors"):
            logger.warning(f"⚠️ MJML compilation warnings: {result['errors']}")
        return result.get("html", "")
    if getattr(result, "errors", None):
        logger.warning(f"⚠️ MJML compilation warnings: {result.errors}")
    return getattr(result, "html", None) or str(result)


def send_via_smtp(
    to: list[str],
    subject: str,
    html_content: str,
    from_address: str,
    reply_to: Optional[str] = None,
) -> dict:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = from_address
    msg["To"] = ", ".join(to)
    if reply_to:
        msg["Reply-To"] = reply_to
    msg.attach(MIMEText(html_content, "html"))

    context = ssl.create_default_context()
    if config.SMTP_PORT == 465:
        server = smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, context=context, timeout=30)
    else:
        server = smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30)
        server.starttls(context=context)

    try:
        server.login(config.SMTP_USER, config.SMTP_PASS)
        server.sendmail(parseaddr(from_address)[1], to, msg.as_string())
    finally:
        server.quit()

    logger.info(f"✅ SMTP email sent via {config.SMTP_HOST}")
    return {"id": f"smtp-{datetime.utcnow().timestamp()}", "success": True}


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
    reply_to: Optional[str] = None,
) -> dict:
    """
    Send an email using SMTP (if configured) or Resend (fallback)

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address
        reply_to: Optional Reply-To address

    Returns:
        Send response dict; ``{"skipped": True, ...}`` when no transport is configured

    Raises:
        Exception: when the configured transport fails
    """
    recipients = [to] if isinstance(to, str) else to
    if not email_configured():
        logger.warning(f"⚠️ Email not configured - skipping '{subject}'")
        return dict(SKIPPED)

    html_content = compile_mjml_to_html(mjml_content)

    if smtp_configured():
        sender = from_address or (
            f"SD Dumps <{config.SMTP_FROM}>" if config.SMTP_FROM else config.EMAIL_FROM_ADDRESS
        )
        try:
            logger.info(f"📧 Sending email via SMTP: {config.SMTP_HOST}")
            return send_via_smtp(recipients, subject, html_content, sender, reply_to)
        except Exception as e:
            if not config.RESEND_API_KEY:
                logger.error(f"❌ SMTP send failed: {e}")
                raise Exception(f"Failed to send email: {str(e)}") from e
            logger.warning(f"⚠️ SMTP failed, falling back to Resend: {e}")

    resend.api_key = config.RESEND_API_KEY
    email_data = {
        "from": from_address or config.EMAIL_FROM_ADDRESS,
        "to": recipients,
        "subject": subject,
        "html": html_content,
    }
    if reply_to:
        email_data["reply_to"] = reply_to

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


async def send_admin_email(subject: str, mjml_content: str, reply_to: Optional[str] = None) -> dict:
    """Email to the business inbox (CONTACT_EMAIL)"""
    if not config.CONTACT_EMAIL:
        logger.warning("⚠️ CONTACT_EMAIL not set - skipping admin notification")
        return {"success": True, "skipped": True, "reason": "Admin email not configured"}
    return await send_email(
        to=config.CONTACT_EMAIL,
        subject=subject,
        mjml_content=mjml_content,
        reply_to=reply_to,
    )


# ============================================
# Booking, payment and contact messages
# ============================================


async def send_booking_emails(
    booking_id: str,
    customer_name: str,
    customer_email: str,
    container_type: str,
    start_date: str,
    end_date: str,
    service_type: str,
    total_amount: float,
    delivery_address: Optional[str] = None,
    pickup_time: Optional[str] = None,
    notes: Optional[str] = None,
) -> dict:
    """Confirmation to the customer, then an alert to the business inbox"""
    if not email_configured():
        logger.warning("⚠️ Email not configured - skipping booking emails")
        return dict(SKIPPED)

    details = {
        "booking_id": booking_id,
        "container_type": container_type,
        "start_date": start_date,
        "end_date": end_date,
        "service_type": service_type,
        "total_amount": total_amount,
        "delivery_address": delivery_address,
        "pickup_time": pickup_time,
        "notes": notes,
    }
    await send_email(
        to=customer_email,
        subject=f"Booking Confirmed - Order #{booking_id[:8]}",
        mjml_content=booking_confirmation_template(customer_name=customer_name, **details),
    )
    logger.info(f"✅ Booking confirmation sent to {customer_email}")

    await send_admin_email(
        subject=f"🔔 New Booking Alert - #{booking_id[:8]}",
        mjml_content=new_booking_admin_template(
            customer_name=customer_name, customer_email=customer_email, **details
        ),
    )
    return {"success": True}


async def send_phone_booking_email(
    customer_name: str,
    customer_email: str,
    payment_link: str,
    container_type: str,
    start_date: str,
    end_date: str,
    total_amount: float,
    expires_at: str,
) -> dict:
    return await send_email(
        to=customer_email,
        subject="Complete Your Booking - Action Required",
        mjml_content=phone_booking_payment_link_template(
            customer_name=customer_name,
            payment_link=payment_link,
            container_type=container_type,
            start_date=start_date,
            end_date=end_date,
            total_amount=total_amount,
            expires_at=expires_at,
        ),
    )


async def send_phone_booking_completed_email(
    customer_name: str,
    customer_email: str,
    booking_id: str,
    container_type: str,
    total_amount: float,
) -> dict:
    return await send_admin_email(
        subject=f"✅ Phone Booking Completed - #{booking_id[:8]}",
        mjml_content=phone_booking_completed_template(
            customer_name=customer_name,
            customer_email=customer_email,
            booking_id=booking_id,
            container_type=container_type,
            total_amount=total_amount,
        ),
        reply_to=customer_email,
    )


async def send_cancellation_email(
    customer_name: str,
    customer_email: str,
    booking_id: str,
    container_type: str,
    start_date: str,
    end_date: str,
    reason: Optional[str] = None,
) -> dict:
    return await send_email(
        to=customer_email,
        subject=f"Booking Cancelled - #{booking_id[:8]}",
        mjml_content=cancellation_template(
            customer_name=customer_name,
            booking_id=booking_id,
            container_type=container_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        ),
    )


async def send_extension_email(
    customer_name: str,
    customer_email: str,
    booking_id: str,
    container_type: str,
    original_end_date: str,
    new_end_date: str,
    additional_days: int,
    additional_cost: float,
    new_total: float,
) -> dict:
    return await send_email(
        to=customer_email,
        subject=f"Rental Extended - #{booking_id[:8]}",
        mjml_content=extension_template(
            customer_name=customer_name,
            booking_id=booking_id,
            container_type=container_type,
            original_end_date=original_end_date,
            new_end_date=new_end_date,
            additional_days=additional_days,
            additional_cost=additional_cost,
            new_total=new_total,
        ),
    )


async def send_payment_receipt_email(
    customer_name: str,
    customer_email: str,
    booking_id: str,
    amount: float,
    description: str,
    transaction_id: str,
    charged_date: str,
) -> dict:
    return await send_email(
        to=customer_email,
        subject=f"💳 Payment Receipt - ${amount:.2f} - Booking #{booking_id[:8]}",
        mjml_content=payment_receipt_template(
            customer_name=customer_name,
            booking_id=booking_id,
            amount=amount,
            description=description,
            transaction_id=transaction_id,
            charged_date=charged_date,
        ),
    )


async def send_review_request_email(customer_name: str, customer_email: str, booking_id: str) -> dict:
    return await send_email(
        to=customer_email,
        subject=f"Thank you for choosing SD Dumps, {customer_name}!",
        mjml_content=review_request_template(
            customer_name=customer_name,
            booking_id=booking_id,
            review_url=config.GOOGLE_REVIEW_URL,
        ),
    )


async def send_contact_email(
    first_name: str, last_name: str, email: str, phone: Optional[str], message: str
) -> dict:
    return await send_admin_email(
        subject=f"New Contact Form Submission from {first_name} {last_name}",
        mjml_content=contact_form_template(first_name, last_name, email, phone, message),
        reply_to=email,
    )


async def send_guest_inquiry_email(
    customer_name: str,
    customer_email: str,
    container_type: str,
    start_date: str,
    end_date: str,
    service_type: str,
    phone: Optional[str] = None,
    delivery_address: Optional[str] = None,
    notes: Optional[str] = None,
) -> dict:
    return await send_admin_email(
        subject="New Guest Booking Request",
        mjml_content=guest_inquiry_template(
            customer_name=customer_name,
            customer_email=customer_email,
            container_type=container_type,
            start_date=start_date,
            end_date=end_date,
            service_type=service_type,
            phone=phone,
            delivery_address=delivery_address,
            notes=notes,
        ),
        reply_to=customer_email,
    )
