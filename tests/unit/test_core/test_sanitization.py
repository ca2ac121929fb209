"""Tests for input sanitization utilities."""
import pytest

from festgate.core.sanitization import (
    MAX_NAME_LENGTH,
    MAX_QR_TOKEN_LENGTH,
    normalize_email,
    normalize_qr_token,
    sanitize_name,
    sanitize_slug,
    sanitize_text,
    truncate_qr_token,
    validate_phone,
    validate_qr_token,
)


class TestSanitizeText:
    """Tests for sanitize_text function."""

    def test_strips_tags_and_whitespace(self):
        assert sanitize_text("  <b>Byte</b>   Me  ") == "Byte Me"

    def test_keeps_quotes_and_ampersands(self):
        """Escaping is left to the client renderer."""
        assert sanitize_text('Tom & "Jerry"') == 'Tom & "Jerry"'

    def test_rejects_leftover_angle_brackets(self):
        with pytest.raises(ValueError, match="HTML-like"):
            sanitize_text("a < b")

    def test_max_length(self):
        with pytest.raises(ValueError, match="maximum length"):
            sanitize_text("x" * 11, max_length=10)

    def test_non_string(self):
        with pytest.raises(ValueError):
            sanitize_text(42)


class TestSanitizeName:

    def test_valid_name(self):
        assert sanitize_name(" Null  Pointers ") == "Null Pointers"

    def test_empty_after_stripping(self):
        with pytest.raises(ValueError, match="Team name cannot be empty"):
            sanitize_name("<i></i>", field="Team name")

    def test_too_long(self):
        with pytest.raises(ValueError):
            sanitize_name("x" * (MAX_NAME_LENGTH + 1))


class TestSanitizeSlug:

    def test_lowercases(self):
        assert sanitize_slug(" HackFest-2026 ") == "hackfest-2026"

    @pytest.mark.parametrize("slug", ["", "hack fest", "hack_fest", "hack:fest"])
    def test_invalid(self, slug):
        with pytest.raises(ValueError):
            sanitize_slug(slug)


class TestContactFields:

    def test_normalize_email(self):
        assert normalize_email("  Asha@College.EDU ") == "asha@college.edu"

    @pytest.mark.parametrize("email", ["asha", "asha@college", "a sha@college.edu"])
    def test_invalid_email(self, email):
        with pytest.raises(ValueError, match="Invalid email"):
            normalize_email(email)

    @pytest.mark.parametrize("phone, expected", [(None, None), ("  ", None), ("9876543210", "9876543210")])
    def test_phone(self, phone, expected):
        assert validate_phone(phone) == expected

    @pytest.mark.parametrize("phone", ["12345", "1234567890", "98765432101"])
    def test_invalid_phone(self, phone):
        with pytest.raises(ValueError):
            validate_phone(phone)


class TestValidateQrToken:

    def test_opaque_tokens_pass(self):
        """No format is assumed beyond a bounded non-empty string."""
        assert validate_qr_token(" anything:goes_here ") == "anything:goes_here"

    @pytest.mark.parametrize("token", ["", "   ", "x" * (MAX_QR_TOKEN_LENGTH + 1)])
    def test_invalid(self, token):
        with pytest.raises(ValueError):
            validate_qr_token(token)


class TestScannedTokens:
    """Raw scanner payloads are trimmed, never rejected."""

    @pytest.mark.parametrize("raw,expected", [
        ("  HACKFEST_T1_M1_ab12cd34\n", "HACKFEST_T1_M1_ab12cd34"),
        ("   ", ""),
        ("", ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_qr_token(raw) == expected

    def test_oversized_payload_passes_through(self):
        raw = "x" * (MAX_QR_TOKEN_LENGTH * 3)

        assert normalize_qr_token(raw) == raw

    def test_truncate_to_column_width(self):
        assert len(truncate_qr_token("x" * (MAX_QR_TOKEN_LENGTH + 50))) == MAX_QR_TOKEN_LENGTH
        assert truncate_qr_token("short") == "short"
