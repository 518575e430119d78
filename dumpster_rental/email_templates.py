"""
MJML Email Templates
Customer and admin emails for bookings, phone bookings and payments
"""

import html
from typing import Optional

from .config import APP_URL

THEME = {
    "primary": "#2563eb",
    "primary_dark": "#1d4ed8",
    "primary_light": "#dbeafe",
    "background": "#f3f4f6",
    "text_primary": "#111827",
    "text_secondary": "#374151",
    "text_muted": "#6b7280",
    "border": "#e5e7eb",
    "success": "#16a34a",
    "warning": "#f59e0b",
    "danger": "#dc2626",
}

BUSINESS_NAME = "SD Dumping Solutions"
BUSINESS_PHONE = "(760) 270-0312"


def _e(value) -> str:
    """Escape user-supplied text before it lands in markup"""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def money(amount: float) -> str:
    return f"${amount:,.2f}"


def detail_rows(rows: list[tuple[str, Optional[str]]]) -> str:
    """Label/value table; rows with an empty value are left out"""
    cells = "".join(
        f"""
        <tr>
          <td style="padding: 8px 0; color: {THEME['text_muted']}; font-weight: 600;">{_e(label)}</td>
          <td style="padding: 8px 0; color: {THEME['text_primary']}; text-align: right;">{_e(value)}</td>
        </tr>"""
        for label, value in rows
        if value not in (None, "")
    )
    return f"""
    <mj-table padding="8px 0" border="none">
      {cells}
    </mj-table>
    """


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    header_color: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 40px 32px 40px">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="8px 0"
              inner-padding="16px 36px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{_e(title)}</mj-title>
        <mj-preview>{_e(preview_text)}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, 'Helvetica Neue', sans-serif" />
          <mj-text font-size="15px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{header_color or THEME['primary']}" padding="28px 20px">
          <mj-column>
            <mj-text align="center" font-size="22px" font-weight="700" color="#ffffff" padding="0">
              {_e(title)}
            </mj-text>
            <mj-text align="center" font-size="14px" color="#ffffff" padding="6px 0 0 0">
              {BUSINESS_NAME}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="32px 40px 16px 40px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="0">
              Questions? Call us at {BUSINESS_PHONE} or reply to this email.
            </mj-text>
            <mj-text align="center" font-size="12px" color="#9ca3af" padding="8px 0 0 0">
              © {BUSINESS_NAME}. Serving San Diego County.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def booking_confirmation_template(
    customer_name: str,
    booking_id: str,
    container_type: str,
    start_date: str,
    end_date: str,
    service_type: str,
    total_amount: float,
    delivery_address: Optional[str] = None,
    pickup_time: Optional[str] = None,
    notes: Optional[str] = None,
) -> str:
    """Customer confirmation after an online booking"""
    content = f"""
    <mj-text>Hi {_e(customer_name)},</mj-text>
    <mj-text>
      Thank you for booking with {BUSINESS_NAME}! Your order <strong>#{_e(booking_id[:8])}</strong>
      has been received. Here are the details:
    </mj-text>
    {detail_rows([
        ("Container", container_type),
        ("Service", service_type.capitalize()),
        ("Start Date", start_date),
        ("End Date", end_date),
        ("Delivery Address", delivery_address),
        ("Pickup Time", pickup_time),
        ("Total", money(total_amount)),
    ])}
    """
    if notes:
        content += f"""
    <mj-text color="{THEME['text_muted']}"><strong>Notes:</strong> {_e(notes)}</mj-text>
    """
    content += """
    <mj-text>We'll reach out before your delivery date to confirm timing.</mj-text>
    """
    return get_base_template(
        title="Booking Confirmed",
        preview_text=f"Order #{booking_id[:8]} is confirmed",
        content_sections=content,
        cta_url=f"{APP_URL}/bookings",
        cta_label="View My Bookings",
    )


def new_booking_admin_template(
    customer_name: str,
    customer_email: str,
    booking_id: str,
    container_type: str,
    start_date: str,
    end_date: str,
    service_type: str,
    total_amount: float,
    delivery_address: Optional[str] = None,
    pickup_time: Optional[str] = None,
    notes: Optional[str] = None,
) -> str:
    """Admin alert for a new online booking"""
    content = f"""
    <mj-text>A new booking was placed on the website.</mj-text>
    {detail_rows([
        ("Booking", f"#{booking_id[:8]}"),
        ("Customer", customer_name),
        ("Email", customer_email),
        ("Container", container_type),
        ("Service", service_type.capitalize()),
        ("Start Date", start_date),
        ("End Date", end_date),
        ("Delivery Address", delivery_address),
        ("Pickup Time", pickup_time),
        ("Total", money(total_amount)),
        ("Notes", notes),
    ])}
    """
    return get_base_template(
        title="New Booking Alert",
        preview_text=f"{customer_name} booked a {container_type}",
        content_sections=content,
        cta_url=f"{APP_URL}/admin",
        cta_label="Open Dashboard",
    )


def phone_booking_payment_link_template(
    customer_name: str,
    payment_link: str,
    container_type: str,
    start_date: str,
    end_date: str,
    total_amount: float,
    expires_at: str,
) -> str:
    """Payment link for a booking the office took over the phone"""
    content = f"""
    <mj-text>Hi {_e(customer_name)},</mj-text>
    <mj-text>
      Thanks for calling {BUSINESS_NAME}. To finish your booking, please add a card and sign the
      rental agreement using the secure link below. Your card will be charged once service is
      confirmed.
    </mj-text>
    {detail_rows([
        ("Container", container_type),
        ("Start Date", start_date),
        ("End Date", end_date),
        ("Estimated Total", money(total_amount)),
    ])}
    <mj-text color="{THEME['warning']}" font-weight="600">
      This link expires on {_e(expires_at)}.
    </mj-text>
    """
    return get_base_template(
        title="Complete Your Booking",
        preview_text="Action required: add your card to confirm your booking",
        content_sections=content,
        cta_url=payment_link,
        cta_label="Complete Booking",
    )


def phone_booking_completed_template(
    customer_name: str,
    customer_email: str,
    booking_id: str,
    container_type: str,
    total_amount: float,
) -> str:
    """Admin notice that a phone customer finished the payment link"""
    content = f"""
    <mj-text>
      {_e(customer_name)} saved a card and signed for booking <strong>#{_e(booking_id[:8])}</strong>.
      The booking is ready to be charged from the dashboard.
    </mj-text>
    {detail_rows([
        ("Customer", customer_name),
        ("Email", customer_email),
        ("Container", container_type),
        ("Total", money(total_amount)),
    ])}
    """
    return get_base_template(
        title="Phone Booking Completed",
        preview_text=f"{customer_name} completed booking #{booking_id[:8]}",
        content_sections=content,
        cta_url=f"{APP_URL}/admin/bookings/payment/{booking_id}",
        cta_label="Charge Booking",
        header_color=THEME["success"],
    )


def cancellation_template(
    customer_name: str,
    booking_id: str,
    container_type: str,
    start_date: str,
    end_date: str,
    reason: Optional[str] = None,
) -> str:
    content = f"""
    <mj-text>Hi {_e(customer_name)},</mj-text>
    <mj-text>Your booking <strong>#{_e(booking_id[:8])}</strong> has been cancelled.</mj-text>
    {detail_rows([
        ("Container", container_type),
        ("Start Date", start_date),
        ("End Date", end_date),
        ("Reason", reason),
    ])}
    <mj-text>If you think this is a mistake or want to rebook, just give us a call.</mj-text>
    """
    return get_base_template(
        title="Booking Cancelled",
        preview_text=f"Booking #{booking_id[:8]} was cancelled",
        content_sections=content,
        header_color=THEME["danger"],
    )


def extension_template(
    customer_name: str,
    booking_id: str,
    container_type: str,
    original_end_date: str,
    new_end_date: str,
    additional_days: int,
    additional_cost: float,
    new_total: float,
) -> str:
    content = f"""
    <mj-text>Hi {_e(customer_name)},</mj-text>
    <mj-text>Your rental <strong>#{_e(booking_id[:8])}</strong> has been extended.</mj-text>
    {detail_rows([
        ("Container", container_type),
        ("Previous End Date", original_end_date),
        ("New End Date", new_end_date),
        ("Additional Days", str(additional_days)),
        ("Additional Cost", money(additional_cost)),
        ("New Total", money(new_total)),
    ])}
    """
    return get_base_template(
        title="Rental Extended",
        preview_text=f"Your rental now ends {new_end_date}",
        content_sections=content,
    )


def payment_receipt_template(
    customer_name: str,
    booking_id: str,
    amount: float,
    description: str,
    transaction_id: str,
    charged_date: str,
) -> str:
    content = f"""
    <mj-text>Hi {_e(customer_name)},</mj-text>
    <mj-text>We've charged your card on file. Here is your receipt:</mj-text>
    {detail_rows([
        ("Amount", money(amount)),
        ("Description", description),
        ("Booking", f"#{booking_id[:8]}"),
        ("Transaction", transaction_id),
        ("Date", charged_date),
    ])}
    """
    return get_base_template(
        title="Payment Receipt",
        preview_text=f"{money(amount)} charged for booking #{booking_id[:8]}",
        content_sections=content,
        header_color=THEME["success"],
    )


def review_request_template(customer_name: str, booking_id: str, review_url: str) -> str:
    content = f"""
    <mj-text>Hi {_e(customer_name)},</mj-text>
    <mj-text>
      Thank you for choosing {BUSINESS_NAME} for booking #{_e(booking_id[:8])}. We're a small local
      business and reviews help us a lot. Would you take a minute to tell others about your experience?
    </mj-text>
    """
    return get_base_template(
        title="How Did We Do?",
        preview_text="Leave us a quick Google review",
        content_sections=content,
        cta_url=review_url,
        cta_label="Leave a Review",
    )


def contact_form_template(
    first_name: str, last_name: str, email: str, phone: Optional[str], message: str
) -> str:
    content = f"""
    <mj-text>New message from the website contact form.</mj-text>
    {detail_rows([
        ("Name", f"{first_name} {last_name}"),
        ("Email", email),
        ("Phone", phone),
    ])}
    <mj-text padding="16px 0 0 0"><strong>Message</strong></mj-text>
    <mj-text>{_e(message).replace(chr(10), "<br/>")}</mj-text>
    """
    return get_base_template(
        title="New Contact Message",
        preview_text=f"{first_name} {last_name} sent a message",
        content_sections=content,
    )


def guest_inquiry_template(
    customer_name: str,
    customer_email: str,
    container_type: str,
    start_date: str,
    end_date: str,
    service_type: str,
    phone: Optional[str] = None,
    delivery_address: Optional[str] = None,
    notes: Optional[str] = None,
) -> str:
    """Booking request from a visitor without an account"""
    content = f"""
    <mj-text color="{THEME['warning']}" font-weight="600">No account. Follow-up required.</mj-text>
    {detail_rows([
        ("Name", customer_name),
        ("Email", customer_email),
        ("Phone", phone),
        ("Container", container_type),
        ("Service", service_type.capitalize()),
        ("Start", start_date),
        ("End", end_date),
        ("Delivery Address", delivery_address),
        ("Notes", notes),
    ])}
    """
    return get_base_template(
        title="New Guest Booking Request",
        preview_text=f"{customer_name} requested a {container_type}",
        content_sections=content,
    )
