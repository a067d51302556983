"""
Tests for save-time amount validation.
"""
import pytest
from tipview.validation import InputError, MISSING_AMOUNT, NOT_POSITIVE, validate_amount


class TestValidateAmount:
    """Tests for validate_amount."""

    @pytest.mark.parametrize("text", ["", "   ", "\t"])
    def test_missing_amount(self, text):
        with pytest.raises(InputError) as exc_info:
            validate_amount(text)

        assert exc_info.value.message == MISSING_AMOUNT == "missing amount"
        assert exc_info.value.hint

    @pytest.mark.parametrize("text", ["-5", "0", "abc", "1,50", "nan", "-inf"])
    def test_not_positive(self, text):
        with pytest.raises(InputError) as exc_info:
            validate_amount(text)

        assert exc_info.value.message == NOT_POSITIVE == "must be a positive number"

    def test_valid_amount(self):
        assert validate_amount("12.75") == pytest.approx(12.75)
        assert validate_amount(" 8 ") == pytest.approx(8.0)

    def test_overlong_amount(self):
        """Test that an amount longer than the field allows is rejected."""
        with pytest.raises(InputError) as exc_info:
            validate_amount("1" * 40)

        assert exc_info.value.message == NOT_POSITIVE

    def test_overlong_whitespace_is_missing(self):
        """Test that padding alone still reads as a missing amount."""
        with pytest.raises(InputError) as exc_info:
            validate_amount(" " * 40)

        assert exc_info.value.message == MISSING_AMOUNT

    def test_digit_separators_rejected(self):
        with pytest.raises(InputError) as exc_info:
            validate_amount("1_000")

        assert exc_info.value.message == NOT_POSITIVE
