import os

from dotenv import load_dotenv

load_dotenv(".env.local")

# ENV variables
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"

# Supabase configuration
SUPABASE_DB_URL = os.getenv("SUPABASE_DB_URL")
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")
ACCESS_TOKEN_COOKIE_NAME = os.getenv("ACCESS_TOKEN_COOKIE_NAME", "sb-access-token")

# Gemini configuration
GEMINI_API_VERSION = "v1beta"
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "30"))

# Razorpay configuration
RAZORPAY_API_URL = os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com/v1")
RAZORPAY_TIMEOUT_SECONDS = float(os.getenv("RAZORPAY_TIMEOUT_SECONDS", "15"))

# User settings defaults
DEFAULT_CURRENCY = "INR"
DEFAULT_DATE_FORMAT = "DD/MM/YYYY"
DEFAULT_FISCAL_YEAR_START = "April"


def get_gemini_api_key() -> str | None:
    """Read the Gemini key at call time so a missing key is reported per request."""
    return os.getenv("GOOGLE_GEMINI_API_KEY") or None


def get_razorpay_credentials() -> tuple[str | None, str | None]:
    return (
        os.getenv("RAZORPAY_KEY_ID") or None,
        os.getenv("RAZORPAY_KEY_SECRET") or None,
    )
