"""NDEF record encoding and decoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass

TNF_EMPTY = 0x00
TNF_WELL_KNOWN = 0x01
TNF_MIME = 0x02
TNF_EXTERNAL = 0x04

_FLAG_MB = 0x80
_FLAG_ME = 0x40
_FLAG_SR = 0x10
_FLAG_IL = 0x08

_TLV_SHORT_LENGTH_MAX = 0xFF
_TLV_LONG_LENGTH_FORMAT = ">H"

_URI_PREFIXES = {
    0x00: "",
    0x01: "http://www.",
    0x02: "https://www.",
    0x03: "http://",
    0x04: "https://",
}


class NDEFError(ValueError):
    """Raised when NDEF data cannot be encoded or decoded."""


@dataclass(frozen=True)
class NDEFRecord:
    """A single record of an NDEF message."""

    tnf: int = TNF_EMPTY
    type: bytes = b""
    id: bytes = b""
    payload: bytes = b""

    def is_text_record(self) -> bool:
        return self.tnf == TNF_WELL_KNOWN and self.type == b"T"

    def is_uri_record(self) -> bool:
        return self.tnf == TNF_WELL_KNOWN and self.type == b"U"

    def get_text(self) -> str | None:
        """Return the text of a Text record, or None if it is not one."""
        if not self.is_text_record():
            return None
        try:
            return parse_text_record_payload(self.payload)
        except NDEFError:
            return None

    def get_uri(self) -> str | None:
        """Return the URI of a URI record, or None if it is not one."""
        if not self.is_uri_record():
            return None
        try:
            return parse_uri_record_payload(self.payload)
        except NDEFError:
            return None


def parse_ndef_message_for_text_record(ndef_message: bytes) -> str:
    """Return the text of the first Text record, or "" if there is none."""
    if not ndef_message:
        return ""
    for record in parse_ndef_records(ndef_message):
        text = record.get_text()
        if text is not None:
            return text
    return ""


def parse_ndef_message_for_uri_record(ndef_message: bytes) -> str:
    """Return the URI of the first URI record, or "" if there is none."""
    if not ndef_message:
        return ""
    for record in parse_ndef_records(ndef_message):
        uri = record.get_uri()
        if uri is not None:
            return uri
    return ""


def encode_ndef_message_with_text_record(text: str, lang_code: str = "en") -> bytes:
    """Encode an NDEF message holding a single Text record."""
    payload = make_text_record_payload(text, lang_code)
    short = len(payload) <= 0xFF
    header = TNF_WELL_KNOWN | _FLAG_MB | _FLAG_ME
    if short:
        header |= _FLAG_SR
        length = bytes((len(payload),))
    else:
        length = struct.pack(">I", len(payload))
    return bytes((header, 1)) + length + b"T" + payload


def parse_text_record_payload(payload: bytes) -> str:
    """Extract the text from a Text record payload."""
    if not payload:
        raise NDEFError("text record payload too short (status byte missing)")
    status = payload[0]
    lang_length = status & 0x3F
    is_utf16 = bool(status & 0x80)
    start = 1 + lang_length
    if start > len(payload):
        raise NDEFError("text record payload too short (language code or text missing)")
    text_bytes = payload[start:]
    if is_utf16:
        if not text_bytes:
            return ""
        if len(text_bytes) % 2:
            raise NDEFError(f"invalid UTF-16 text length: {len(text_bytes)}")
        return text_bytes.decode("utf-16-le", errors="replace").strip()
    return text_bytes.decode("utf-8", errors="replace")


def make_text_record_payload(text: str, lang_code: str = "en") -> bytes:
    """Build a UTF-8 Text record payload."""
    lang = (lang_code or "en").encode("utf-8")[:0x3F]
    return bytes((len(lang),)) + lang + text.encode("utf-8")


def make_uri_record_payload(uri: str) -> bytes:
    """Build a URI record payload with no prefix abbreviation."""
    return b"\x00" + uri.encode("utf-8")


def parse_uri_record_payload(payload: bytes) -> str:
    """Extract the URI from a URI record payload, expanding known prefixes."""
    if not payload:
        raise NDEFError("URI record payload too short")
    prefix = _URI_PREFIXES.get(payload[0], "")
    return prefix + payload[1:].decode("utf-8", errors="replace")


def get_length_field_size(length: int) -> int:
    """Return the size of a TLV length field for the given length.

    Short lengths take one byte; longer ones take a 0xFF marker byte
    followed by a two-byte big-endian length.
    """
    if length > _TLV_SHORT_LENGTH_MAX:
        return 1 + struct.calcsize(_TLV_LONG_LENGTH_FORMAT)
    return 1


def parse_ndef_records(ndef_message: bytes) -> list[NDEFRecord]:
    """Parse raw NDEF message bytes into records."""
    if not ndef_message:
        raise NDEFError("empty NDEF message")

    data = bytes(ndef_message)
    size = len(data)
    records: list[NDEFRecord] = []
    offset = 0

    while offset < size:
        header = data[offset]
        last = bool(header & _FLAG_ME)
        short = bool(header & _FLAG_SR)
        has_id = bool(header & _FLAG_IL)
        tnf = header & 0x07
        pos = offset + 1

        if pos + 1 > size:
            raise NDEFError(f"invalid NDEF message: truncated type length at offset {pos - 1}")
        type_length = data[pos]
        pos += 1

        if short:
            if pos + 1 > size:
                raise NDEFError(
                    f"invalid NDEF message: truncated short record payload length at offset {pos - 1}"
                )
            payload_length = data[pos]
            pos += 1
        else:
            if pos + 4 > size:
                raise NDEFError(
                    f"invalid NDEF message: truncated non-short record payload length at offset {pos - 1}"
                )
            (payload_length,) = struct.unpack_from(">I", data, pos)
            pos += 4

        id_length = 0
        if has_id:
            if pos + 1 > size:
                raise NDEFError(f"invalid NDEF message: truncated ID length at offset {pos - 1}")
            id_length = data[pos]
            pos += 1

        if pos + type_length > size:
            raise NDEFError(f"invalid NDEF message: truncated type field at offset {pos - 1}")
        record_type = data[pos:pos + type_length]
        pos += type_length

        record_id = b""
        if id_length:
            if pos + id_length > size:
                raise NDEFError(f"invalid NDEF message: truncated ID field at offset {pos - 1}")
            record_id = data[pos:pos + id_length]
            pos += id_length

        if pos + payload_length > size:
            raise NDEFError(f"invalid NDEF message: truncated payload at offset {pos - 1}")
        payload = data[pos:pos + payload_length]
        pos += payload_length

        records.append(NDEFRecord(tnf=tnf, type=record_type, id=record_id, payload=payload))
        offset = pos
        if last:
            break

    return records


def encode_ndef_records(records: list[NDEFRecord]) -> bytes:
    """Encode records into raw NDEF message bytes."""
    if not records:
        raise NDEFError("cannot encode empty record list")

    out = bytearray()
    last_index = len(records) - 1
    for index, record in enumerate(records):
        payload = bytes(record.payload or b"")
        record_type = bytes(record.type or b"")
        record_id = bytes(record.id or b"")
        short = len(payload) <= 0xFF

        header = record.tnf & 0x07
        if index == 0:
            header |= _FLAG_MB
        if index == last_index:
            header |= _FLAG_ME
        if short:
            header |= _FLAG_SR
        if record_id:
            header |= _FLAG_IL

        out.append(header)
        out.append(len(record_type) & 0xFF)
        if short:
            out.append(len(payload))
        else:
            out += struct.pack(">I", len(payload) & 0xFFFFFFFF)
        if record_id:
            out.append(len(record_id) & 0xFF)
        out += record_type
        out += record_id
        out += payload

    return bytes(out)