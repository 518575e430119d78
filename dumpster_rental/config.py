import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dumpster_rental.db")

# Firebase Configuration (ID token verification only)
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Stripe Configuration
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_CURRENCY = os.getenv("STRIPE_CURRENCY", "usd")
# When enabled every saved-card charge is reduced to $1.00 (live key smoke testing)
STRIPE_TEST_CHARGE_MODE = os.getenv("TEST", "false").lower() == "true"

# Google Distance Matrix
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY")
BASE_ZIP_CODE = os.getenv("BASE_ZIP_CODE", "92082")  # Valley Center, CA yard

# Cloudflare R2 Configuration (signature images)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "sd-dumps")

# Public site base URL, used for payment links sent to phone customers
APP_URL = os.getenv("APP_URL", "https://www.sddumpingsolutions.com").rstrip("/")

# Email: custom SMTP first, Resend as fallback
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "SD Dumps <noreply@sddumpingsolutions.com>")
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASS = os.getenv("SMTP_PASS")
SMTP_FROM = os.getenv("SMTP_FROM", SMTP_USER or "")
CONTACT_EMAIL = os.getenv("CONTACT_EMAIL")
GOOGLE_REVIEW_URL = os.getenv("GOOGLE_REVIEW_URL", "https://g.page/r/sd-dumping-solutions/review")

# Payment links for phone bookings
PAYMENT_LINK_TTL_DAYS = int(os.getenv("PAYMENT_LINK_TTL_DAYS", "7"))
# Optional shared secret for the expiry sweep endpoint (cron callers)
CRON_SECRET = os.getenv("CRON_SECRET")

# Shared profile that owns phone bookings for customers without an account
GUEST_USER_EMAIL = os.getenv("GUEST_USER_EMAIL", "guest@sddumpingsolutions.com")
