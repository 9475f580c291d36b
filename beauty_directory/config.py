import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./beauty_directory.db")

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

# Clerk Configuration
# Session tokens are RS256 JWTs signed with the instance keys published at the JWKS URL
# e.g. https://<your-instance>.clerk.accounts.dev/.well-known/jwks.json
CLERK_JWKS_URL = os.getenv("CLERK_JWKS_URL")
# Expected "iss" claim (the Clerk frontend API URL). Skipped when unset.
CLERK_ISSUER = os.getenv("CLERK_ISSUER")
# Comma separated list of origins accepted in the "azp" claim. Skipped when empty.
CLERK_AUTHORIZED_PARTIES = [
    origin.strip()
    for origin in os.getenv("CLERK_AUTHORIZED_PARTIES", "").split(",")
    if origin.strip()
]
# Allowed clock skew when checking exp/nbf
CLERK_CLOCK_SKEW_SECONDS = int(os.getenv("CLERK_CLOCK_SKEW_SECONDS", "5"))

# Frontend base URL, used in notification links and CORS defaults
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Nominatim (OpenStreetMap) Configuration
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org").rstrip(
    "/"
)
# Required by Nominatim policy (include a way to contact you)
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "BeautyDirectory/1.0")
NOMINATIM_COUNTRY_CODES = os.getenv("NOMINATIM_COUNTRY_CODES", "au")
GEOCODING_SEARCH_RPM = int(os.getenv("GEOCODING_SEARCH_RPM", "60"))
GEOCODING_CACHE_SECONDS = int(os.getenv("GEOCODING_CACHE_SECONDS", "3600"))

# Page visit counter is public, keep it from being inflated by a single client
PAGE_VISIT_RPM = int(os.getenv("PAGE_VISIT_RPM", "30"))

# CORS Configuration
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000").split(",")
    if origin.strip()
]

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
