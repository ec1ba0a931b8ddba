import pytest

from nfcagent.ndef import (
    NDEFError,
    NDEFRecord,
    encode_ndef_message_with_text_record,
    encode_ndef_records,
    get_length_field_size,
    make_text_record_payload,
    make_uri_record_payload,
    parse_ndef_message_for_text_record,
    parse_ndef_message_for_uri_record,
    parse_ndef_records,
    parse_text_record_payload,
    parse_uri_record_payload,
)


def test_text_record_encode_decode():
    text = "Hello NFC World!"
    encoded = encode_ndef_message_with_text_record(text, "en")
    assert len(encoded) > 0
    assert parse_ndef_message_for_text_record(encoded) == text


@pytest.mark.parametrize(
    "text,lang_code",
    [
        ("Hello", "en"),
        ("Bonjour", "fr"),
        ("Hola", "es"),
        ("こんにちは", "ja"),
        ("", ""),
        ("Test", ""),
    ],
)
def test_text_record_language_codes(text, lang_code):
    encoded = encode_ndef_message_with_text_record(text, lang_code)
    assert parse_ndef_message_for_text_record(encoded) == text


def test_text_record_short_and_long():
    short_encoded = encode_ndef_message_with_text_record("Short", "en")
    assert short_encoded[0] & 0x10
    assert parse_ndef_message_for_text_record(short_encoded) == "Short"

    long_text = "a" * 300
    long_encoded = encode_ndef_message_with_text_record(long_text, "en")
    assert not long_encoded[0] & 0x10
    assert parse_ndef_message_for_text_record(long_encoded) == long_text


def test_parse_ndef_records_single_text():
    text = "Test Message"
    records = parse_ndef_records(encode_ndef_message_with_text_record(text, "en"))
    assert len(records) == 1
    record = records[0]
    assert record.tnf == 0x01
    assert record.type == b"T"
    assert parse_text_record_payload(record.payload) == text


def test_encode_ndef_records_multiple():
    records = [
        NDEFRecord(tnf=0x01, type=b"T", payload=make_text_record_payload("Hello", "en")),
        NDEFRecord(tnf=0x01, type=b"U", payload=make_uri_record_payload("https://example.com")),
    ]
    encoded = encode_ndef_records(records)
    assert len(encoded) > 0
    assert encoded[0] & 0x80

    decoded = parse_ndef_records(encoded)
    assert len(decoded) == 2
    assert decoded[0].tnf == 0x01 and decoded[0].type == b"T"
    assert decoded[1].tnf == 0x01 and decoded[1].type == b"U"
    assert decoded[0].get_text() == "Hello"
    assert decoded[1].get_uri() == "https://example.com"


@pytest.mark.parametrize(
    "uri", ["https://example.com", "http://test.com", "mailto:test@example.com", "[phone]"]
)
def test_uri_record_payload(uri):
    assert parse_uri_record_payload(make_uri_record_payload(uri)) == uri


@pytest.mark.parametrize(
    "full_uri,code,suffix",
    [
        ("http://www.example.com", 0x01, "example.com"),
        ("https://www.example.com", 0x02, "example.com"),
        ("http://example.com", 0x03, "example.com"),
        ("https://example.com", 0x04, "example.com"),
    ],
)
def test_uri_record_abbreviations(full_uri, code, suffix):
    payload = bytes((code,)) + suffix.encode()
    assert parse_uri_record_payload(payload) == full_uri


def test_uri_record_empty_payload_raises():
    with pytest.raises(NDEFError):
        parse_uri_record_payload(b"")


def test_parse_empty_ndef():
    with pytest.raises(NDEFError):
        parse_ndef_records(b"")


@pytest.mark.parametrize(
    "data",
    [
        b"",
        bytes([0xD1]),
        bytes([0xD1, 0x01]),
        bytes([0xD1, 0x05, 0x10, 0x54]),
        bytes([0xD1, 0x01, 0xFF, 0x54]),
    ],
    ids=[
        "truncated header",
        "truncated type length",
        "truncated payload length",
        "truncated type",
        "truncated payload",
    ],
)
def test_parse_malformed_ndef(data):
    with pytest.raises(NDEFError):
        parse_ndef_records(data)


def test_make_text_record_payload():
    payload = make_text_record_payload("Hello", "en")
    lang_length = payload[0] & 0x3F
    assert lang_length == 2
    assert payload[1:1 + lang_length] == b"en"
    assert payload[1 + lang_length:] == b"Hello"


def test_make_text_record_payload_defaults_language():
    assert make_text_record_payload("Hello", "") == make_text_record_payload("Hello", "en")


@pytest.mark.parametrize(
    "text",
    [
        "Simple text",
        "Text with emoji 😀🎉",
        "Multiple\nLines\nOf\nText",
        "\x00" * 500,
        "",
    ],
)
def test_round_trip(text):
    encoded = encode_ndef_message_with_text_record(text, "en")
    assert parse_ndef_message_for_text_record(encoded) == text


def test_parse_text_record_payload_utf16():
    payload = bytes([0x82, ord("e"), ord("n"), 0x48, 0x00, 0x69, 0x00])
    assert parse_text_record_payload(payload) == "Hi"


def test_parse_text_record_payload_utf16_odd_length():
    with pytest.raises(NDEFError):
        parse_text_record_payload(bytes([0x80, 0x48]))


def test_parse_text_record_payload_errors():
    with pytest.raises(NDEFError):
        parse_text_record_payload(b"")
    with pytest.raises(NDEFError):
        parse_text_record_payload(bytes([0x05, ord("e")]))


def test_encode_decode_record_with_id():
    record = NDEFRecord(
        tnf=0x01, type=b"T", id=b"test-id", payload=make_text_record_payload("Hello", "en")
    )
    encoded = encode_ndef_records([record])
    assert encoded[0] & 0x08
    decoded = parse_ndef_records(encoded)
    assert len(decoded) == 1
    assert decoded[0].id == record.id
    assert decoded[0] == record


def test_encode_empty_record_list_raises():
    with pytest.raises(NDEFError):
        encode_ndef_records([])


def test_single_text_encoders_agree():
    record = NDEFRecord(tnf=0x01, type=b"T", payload=make_text_record_payload("Hi", "en"))
    assert encode_ndef_records([record]) == encode_ndef_message_with_text_record("Hi", "en")


def test_long_payload_round_trip_through_records():
    record = NDEFRecord(tnf=0x02, type=b"text/plain", payload=b"x" * 400)
    encoded = encode_ndef_records([record])
    assert not encoded[0] & 0x10
    assert parse_ndef_records(encoded) == [record]


def test_record_kind_checks():
    text_record = NDEFRecord(tnf=0x01, type=b"T", payload=make_text_record_payload("a", "en"))
    uri_record = NDEFRecord(tnf=0x01, type=b"U", payload=make_uri_record_payload("b"))
    assert text_record.is_text_record() and not text_record.is_uri_record()
    assert uri_record.is_uri_record() and not uri_record.is_text_record()
    assert text_record.get_uri() is None
    assert uri_record.get_text() is None
    assert text_record.get_text() == "a"
    assert uri_record.get_uri() == "b"


def test_parse_message_for_uri_record():
    records = [
        NDEFRecord(tnf=0x01, type=b"T", payload=make_text_record_payload("Hello", "en")),
        NDEFRecord(tnf=0x01, type=b"U", payload=make_uri_record_payload("https://example.com")),
    ]
    encoded = encode_ndef_records(records)
    assert parse_ndef_message_for_uri_record(encoded) == "https://example.com"
    assert parse_ndef_message_for_uri_record(b"") == ""
    assert parse_ndef_message_for_text_record(b"") == ""


def test_parse_message_without_matching_record():
    encoded = encode_ndef_message_with_text_record("only text", "en")
    assert parse_ndef_message_for_uri_record(encoded) == ""


def test_parsing_stops_at_message_end():
    encoded = encode_ndef_message_with_text_record("end", "en") + b"\xff\xff"
    assert len(parse_ndef_records(encoded)) == 1


@pytest.mark.parametrize("length,size", [(0, 1), (255, 1), (256, 3)])
def test_get_length_field_size(length, size):
    assert get_length_field_size(length) == size