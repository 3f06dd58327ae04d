from enum import Enum

from proto_printer.encoding import (
    MAX_STRING_LEN,
    TRUNCATION_MARKER,
    UNTRUNCATED_PREFIX,
    escape_string,
    format_scalar,
    quote_bytes,
    sanitize_string,
)


class Color(Enum):
    RED = 1
    GREEN = 2


class TestSanitizeString:
    def test_short_string_untouched(self):
        assert sanitize_string("hello world") == "hello world"

    def test_long_string_truncated(self):
        result = sanitize_string("a" * 250)
        assert result == "a" * MAX_STRING_LEN + TRUNCATION_MARKER
        assert result == "a" * 200 + "[...]"

    def test_exactly_max_length_untouched(self):
        assert sanitize_string("b" * 200) == "b" * 200

    def test_url_prefix_not_truncated(self):
        url = UNTRUNCATED_PREFIX + "x" * 246
        assert len(url) == 250
        assert sanitize_string(url) == url

    def test_truncation_happens_before_escaping(self):
        result = sanitize_string('"' * 201)
        assert result == "\\u0022" * 200 + "[...]"


class TestEscapeString:
    def test_printable_ascii_passes_through(self):
        assert escape_string("abc XYZ 0-9 ~!") == "abc XYZ 0-9 ~!"

    def test_double_quote_escaped(self):
        assert escape_string('say "hi"') == "say \\u0022hi\\u0022"

    def test_single_quote_escaped(self):
        assert escape_string("it's") == "it\\u0027s"

    def test_control_characters_escaped(self):
        assert escape_string("a\nb\tc") == "a\\u000ab\\u0009c"

    def test_backslash_passes_through(self):
        assert escape_string("a\\b") == "a\\b"

    def test_non_ascii_escaped(self):
        assert escape_string("café") == "caf\\u00e9"

    def test_delete_character_escaped(self):
        assert escape_string("\x7f") == "\\u007f"

    def test_astral_character_uses_surrogate_pair(self):
        assert escape_string("\U0001F600") == "\\ud83d\\ude00"


class TestQuoteBytes:
    def test_none_is_empty_quotes(self):
        assert quote_bytes(None) == '""'

    def test_empty(self):
        assert quote_bytes(b"") == '""'

    def test_tab_is_octal(self):
        assert quote_bytes(b"\x09") == '"\\011"'

    def test_printable_byte_literal(self):
        assert quote_bytes(b"\x41") == '"A"'

    def test_double_quote_backslash_escaped(self):
        assert quote_bytes(b"\x22") == '"\\""'

    def test_backslash_escaped(self):
        assert quote_bytes(b"\\") == '"\\\\"'

    def test_high_bytes_are_unsigned_octal(self):
        assert quote_bytes(b"\x80\xff") == '"\\200\\377"'

    def test_mixed(self):
        assert quote_bytes(b"ab\x00'c") == '"ab\\000\'c"'

    def test_bytearray_and_memoryview(self):
        assert quote_bytes(bytearray(b"\x01z")) == '"\\001z"'
        assert quote_bytes(memoryview(b"z\x7f")) == '"z\\177"'


class TestFormatScalar:
    def test_int(self):
        assert format_scalar(42) == "42"

    def test_negative_int(self):
        assert format_scalar(-7) == "-7"

    def test_float(self):
        assert format_scalar(1.5) == "1.5"

    def test_bool(self):
        assert format_scalar(True) == "true"
        assert format_scalar(False) == "false"

    def test_enum_member_by_name(self):
        assert format_scalar(Color.GREEN) == "GREEN"
