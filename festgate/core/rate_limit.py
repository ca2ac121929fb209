"""Rate limiting configuration."""
import os
from slowapi import Limiter
from slowapi.util import get_remote_address


def get_client_ip(request):
    """Get client IP for rate limiting, considering proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded.split(",")[0].strip()

    return get_remote_address(request)


# Uses Redis if REDIS_URL is set (Docker/production), falls back to memory for local dev
limiter = Limiter(
    key_func=get_client_ip,
    default_limits=["100/minute"],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window"
)

# Rate limit definitions for different endpoint categories
# Gate and canteen scanners sit behind venue WiFi NAT, so scan limits
# are sized for a whole queue sharing one public IP
RATE_LIMITS = {
    "checkin_scan": "300/minute",
    "checkin_status": "300/minute",
    "food_check": "300/minute",
    "food_scan": "300/minute",
    "login": "10/minute",
    "register": "10/minute",
}
