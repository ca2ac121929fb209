"""Input sanitization utilities."""
import re
from typing import Optional


# Maximum length constraints for security
MAX_NAME_LENGTH = 200       # Event, team and member names
MAX_SLUG_LENGTH = 80
MAX_QR_TOKEN_LENGTH = 200   # Canteen tokens are ~60 chars, member tokens ~40
MAX_SCAN_INPUT_LENGTH = 4096  # Raw scanner payloads; longer bodies are refused outright

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^[6-9]\d{9}$')


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize text input to prevent XSS attacks.

    Strips HTML tags and normalizes whitespace, but does NOT escape HTML
    entities because the React client escapes output when rendering.

    Raises:
        ValueError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    # Reject inputs that still contain HTML-like patterns after stripping
    if '<' in sanitized or '>' in sanitized:
        raise ValueError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def sanitize_name(name: str, field: str = "Name") -> str:
    """Sanitize a display name (event, team, member, user)."""
    sanitized = sanitize_text(name, max_length=MAX_NAME_LENGTH)

    if not sanitized:
        raise ValueError(f"{field} cannot be empty")

    return sanitized


def sanitize_slug(slug: str) -> str:
    """
    Normalize an event slug.

    Slugs are lowercase letters, digits and hyphens; they end up uppercased
    inside every QR token issued for the event.
    """
    if not isinstance(slug, str):
        raise ValueError("Slug must be a string")

    sanitized = slug.strip().lower()

    if not sanitized:
        raise ValueError("Slug cannot be empty")

    if len(sanitized) > MAX_SLUG_LENGTH:
        raise ValueError(f"Slug exceeds maximum length of {MAX_SLUG_LENGTH} characters")

    if not re.match(r'^[a-z0-9-]+$', sanitized):
        raise ValueError("Slug can only contain letters, numbers, and hyphens")

    return sanitized


def normalize_email(email: str) -> str:
    """Lowercase, trim and validate an email address."""
    if not isinstance(email, str):
        raise ValueError("Email must be a string")

    normalized = email.strip().lower()

    if not EMAIL_PATTERN.match(normalized):
        raise ValueError(f"Invalid email format: {email}")

    return normalized


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """Validate a ten-digit mobile number; empty values are allowed."""
    if phone is None:
        return None

    phone = phone.strip()
    if not phone:
        return None

    if not PHONE_PATTERN.match(phone):
        raise ValueError("Please provide a valid phone number")

    return phone


def validate_qr_token(token: str) -> str:
    """
    Validate a scanned QR token before processing.

    QR tokens are opaque: no format is assumed beyond "non-empty string of
    bounded length". Anything that passes here but matches nothing simply
    resolves to "not found" further down.
    """
    if not isinstance(token, str):
        raise ValueError("QR token must be a string")

    token = token.strip()

    if not token:
        raise ValueError("Please provide a valid QR token")

    if len(token) > MAX_QR_TOKEN_LENGTH:
        raise ValueError(f"QR token exceeds maximum length of {MAX_QR_TOKEN_LENGTH} characters")

    return token


def normalize_qr_token(token: str) -> str:
    """
    Trim a raw scanner payload without judging it.

    Scans must always produce an outcome, so empty or oversized payloads are
    passed through and resolve to "not found" instead of failing validation.
    """
    return token.strip()


def truncate_qr_token(token: str) -> str:
    """Clip a scanned payload to what the ledger's token columns hold."""
    return token[:MAX_QR_TOKEN_LENGTH]
