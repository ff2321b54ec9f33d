import pytest

from tileterm.encoding import (
    REPLACEMENT_CHARACTER,
    CustomCodepage,
    UCS2Encoding,
    UCS4Encoding,
    UTF8Encoding,
    get_unibyte_encoding,
)


def test_utf8_ascii():
    assert UTF8Encoding().encode("A") == b"A"
    assert UTF8Encoding().decode(b"A") == "A"


@pytest.mark.parametrize("text", ["hello", "\u00e9t\u00e9", "\u0416\u2500\uffee", ""])
def test_utf8_matches_standard_encoding_in_bmp(text):
    enc = UTF8Encoding()
    assert enc.encode(text) == text.encode("utf-8")
    assert enc.decode(text.encode("utf-8")) == text


def test_utf8_astral_character_is_substituted():
    assert UTF8Encoding().decode("\U0001F600".encode("utf-8")) == "\x1a"


def test_utf8_astral_character_is_dropped_on_encode():
    assert UTF8Encoding().encode("a\U0001F600b") == b"ab"


def test_utf8_truncated_sequence_stops_decoding():
    assert UTF8Encoding().decode(b"ab\xc3") == "ab"


def test_utf8_high_surrogate_is_substituted():
    encoded = UTF8Encoding().encode("\ud800")
    assert len(encoded) == 3
    assert UTF8Encoding().decode(encoded) == "\x1a"


def test_utf8_code_conversion_round_trip():
    enc = UTF8Encoding()
    assert enc.char_to_code(enc.code_to_char(0x2588)) == 0x2588


def test_encoding_names_and_equality():
    assert UTF8Encoding().name == "utf-8"
    assert UCS2Encoding().name == "ucs-2"
    assert UCS4Encoding().name == "ucs-4"
    assert UTF8Encoding() == UTF8Encoding()
    assert UTF8Encoding() != UCS4Encoding()


def test_ucs2_round_trip_in_bmp():
    text = "abc\u2500"
    units = UCS2Encoding().encode(text)
    assert units == [ord(c) for c in text]
    assert UCS2Encoding().decode(units) == text


def test_ucs2_truncates_astral_characters():
    units = UCS2Encoding().encode("\U0001F600")
    assert len(units) == 1
    assert all(0 <= u <= 0xFFFF for u in units)


def test_ucs4_round_trip():
    text = "x\U0001F600y"
    assert UCS4Encoding().decode(UCS4Encoding().encode(text)) == text


def _codepage():
    return CustomCodepage("test", b"U+0041, 0x42\n67-69\n")


def test_custom_codepage_decode():
    assert _codepage().decode(bytes([0, 1, 2, 3, 4])) == "ABCDE"


def test_custom_codepage_unknown_byte_is_replacement():
    assert _codepage().decode(bytes([200])) == chr(REPLACEMENT_CHARACTER)
    assert _codepage().code_to_char(99) == chr(REPLACEMENT_CHARACTER)


def test_custom_codepage_encode_with_substitute():
    assert _codepage().encode("AZ") == bytes([0, 0x1A])


def test_custom_codepage_round_trip():
    cp = _codepage()
    assert cp.decode(cp.encode("EDCBA")) == "EDCBA"


def test_custom_codepage_char_to_code():
    cp = _codepage()
    assert cp.char_to_code("Z") == -1
    assert cp.code_to_char(cp.char_to_code("D")) == "D"


def test_custom_codepage_negative_value_wraps_as_byte():
    cp = _codepage()
    assert cp.code_to_char(-255) == cp.code_to_char(1)


def test_custom_codepage_skips_invalid_entries():
    cp = CustomCodepage("test", b"5-3, zz, U+0041")
    assert cp.code_to_char(0) == "A"
    assert cp.code_to_char(1) == chr(REPLACEMENT_CHARACTER)


def test_custom_codepage_accepts_utf8_bom_and_str():
    with_bom = CustomCodepage("a", b"\xef\xbb\xbf0x41")
    from_text = CustomCodepage("b", "0x41")
    assert with_bom.decode(b"\x00") == from_text.decode(b"\x00") == "A"


def test_custom_codepage_rejects_utf16():
    with pytest.raises(ValueError):
        CustomCodepage("bad", b"\xff\xfe4\x001\x00")


def test_get_unibyte_encoding_utf8():
    assert get_unibyte_encoding("utf8", None) == UTF8Encoding()
    assert get_unibyte_encoding("utf-8", None) == UTF8Encoding()


def test_get_unibyte_encoding_custom():
    enc = get_unibyte_encoding("mine", b"0x41")
    assert enc.name == "mine"
    assert enc.decode(b"\x00") == "A"


def test_get_unibyte_encoding_missing_data():
    with pytest.raises(LookupError):
        get_unibyte_encoding("437", None)