"""Messages that can be written to and read from a card."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Iterator, Protocol, Union

from .ndef import (
    TNF_EMPTY,
    TNF_EXTERNAL,
    TNF_MIME,
    TNF_WELL_KNOWN,
    NDEFError,
    NDEFRecord,
    encode_ndef_records,
    make_text_record_payload,
    make_uri_record_payload,
    parse_ndef_records,
    parse_text_record_payload,
    parse_uri_record_payload,
)

_DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class TextMessage:
    """Raw bytes from a card that does not hold NDEF data."""

    data: bytes = b""

    @classmethod
    def from_string(cls, text: str) -> TextMessage:
        return cls(text.encode("utf-8"))

    @property
    def text(self) -> str:
        """The bytes decoded as UTF-8."""
        return self.data.decode("utf-8", errors="replace")

    def encode(self) -> bytes:
        """Return the raw bytes unchanged."""
        return self.data

    def message_type(self) -> str:
        return "raw"

    def __str__(self) -> str:
        return self.text

    def __bytes__(self) -> bytes:
        return self.data


class RecordBuilder(Protocol):
    """Anything that can be turned into an NDEF record."""

    def to_record(self) -> NDEFRecord: ...


@dataclass
class NDEFText:
    """A Text record described by its content and language."""

    content: str = ""
    language: str = _DEFAULT_LANGUAGE

    def to_record(self) -> NDEFRecord:
        return NDEFRecord(
            tnf=TNF_WELL_KNOWN,
            type=b"T",
            payload=make_text_record_payload(self.content, self.language or _DEFAULT_LANGUAGE),
        )


@dataclass
class NDEFURI:
    """A URI record."""

    content: str = ""

    def to_record(self) -> NDEFRecord:
        return NDEFRecord(tnf=TNF_WELL_KNOWN, type=b"U", payload=make_uri_record_payload(self.content))


@dataclass
class NDEFMIME:
    """A MIME media type record."""

    type: str = ""
    data: bytes = b""

    def to_record(self) -> NDEFRecord:
        return NDEFRecord(tnf=TNF_MIME, type=self.type.encode("utf-8"), payload=bytes(self.data))


@dataclass
class NDEFExternal:
    """An external type record, such as ``example.com:myapp``."""

    domain: str = ""
    data: bytes = b""

    def to_record(self) -> NDEFRecord:
        return NDEFRecord(tnf=TNF_EXTERNAL, type=self.domain.encode("utf-8"), payload=bytes(self.data))


@dataclass
class NDEFEmpty:
    """An empty record."""

    def to_record(self) -> NDEFRecord:
        return NDEFRecord(tnf=TNF_EMPTY)


AnyRecordBuilder = Union[NDEFText, NDEFURI, NDEFMIME, NDEFExternal, NDEFEmpty]


@dataclass
class NDEFRecordPayload:
    """A record in a form ready for JSON responses."""

    type: str
    tnf: int
    payload: bytes
    content: str = ""
    language: str = ""
    id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable dict; empty optional fields are left out."""
        result: dict[str, Any] = {"type": self.type}
        if self.content:
            result["content"] = self.content
        if self.language:
            result["language"] = self.language
        result["tnf"] = self.tnf
        if self.id:
            result["id"] = self.id
        result["payload"] = base64.b64encode(self.payload).decode("ascii")
        return result


@dataclass
class NDEFMessagePayload:
    """A message in a form ready for JSON responses."""

    type: str = "ndef"
    records: list[NDEFRecordPayload] = field(default_factory=list)


class NDEFMessage:
    """A structured NDEF message made of records."""

    def __init__(self, records: list[NDEFRecord] | None = None) -> None:
        self._records: list[NDEFRecord] = list(records or [])

    def __repr__(self) -> str:
        return f"NDEFMessage({self._records!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NDEFMessage):
            return NotImplemented
        return self._records == other._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[NDEFRecord]:
        return iter(self._records)

    def add_record(self, record: NDEFRecord) -> NDEFMessage:
        self._records.append(record)
        return self

    def add_text(self, text: str, lang_code: str = _DEFAULT_LANGUAGE) -> NDEFMessage:
        return self.add_record(NDEFText(text, lang_code or _DEFAULT_LANGUAGE).to_record())

    def add_uri(self, uri: str) -> NDEFMessage:
        return self.add_record(NDEFURI(uri).to_record())

    def encode(self) -> bytes:
        if not self._records:
            raise NDEFError("cannot encode empty NDEF message")
        return encode_ndef_records(self._records)

    def message_type(self) -> str:
        return "ndef"

    def records(self) -> list[NDEFRecord]:
        return list(self._records)

    def get_text(self) -> str:
        """Return the text of the first Text record."""
        for record in self._records:
            text = record.get_text()
            if text is not None:
                return text
        raise NDEFError("no text record found in NDEF message")

    def get_uri(self) -> str:
        """Return the URI of the first URI record."""
        for record in self._records:
            uri = record.get_uri()
            if uri is not None:
                return uri
        raise NDEFError("no URI record found in NDEF message")

    def to_builder(self) -> NDEFMessageBuilder:
        """Convert to a builder for editing; unknown records are dropped."""
        builders = [b for b in map(record_to_builder, self._records) if b is not None]
        return NDEFMessageBuilder(builders)

    def to_payload(self) -> NDEFMessagePayload:
        result = NDEFMessagePayload()
        for record in self._records:
            item = NDEFRecordPayload(type="", tnf=record.tnf, payload=bytes(record.payload))
            if record.id:
                item.id = record.id.decode("utf-8", errors="replace")
            text = record.get_text()
            uri = record.get_uri() if text is None else None
            if text is not None:
                item.type = "text"
                item.content = text
                item.language = extract_language_from_text_record(record.payload)
            elif uri is not None:
                item.type = "uri"
                item.content = uri
            else:
                item.type = record.type.decode("utf-8", errors="replace")
            result.records.append(item)
        return result

    def to_json_map(self) -> dict[str, Any]:
        payload = self.to_payload()
        return {"type": payload.type, "records": [r.to_dict() for r in payload.records]}


@dataclass
class NDEFMessageBuilder:
    """Declarative construction of NDEF messages."""

    records: list[AnyRecordBuilder] = field(default_factory=list)

    def build(self) -> NDEFMessage:
        if not self.records:
            raise NDEFError("cannot build empty NDEF message (no records provided)")
        return NDEFMessage([builder.to_record() for builder in self.records])

    def encode(self) -> bytes:
        return self.build().encode()

    def message_type(self) -> str:
        return "ndef"


def decode_ndef(data: bytes) -> NDEFMessage:
    """Parse raw bytes into an NDEF message."""
    return NDEFMessage(parse_ndef_records(data))


def decode_text(data: bytes) -> TextMessage:
    """Wrap raw bytes from a card without NDEF support."""
    return TextMessage(bytes(data))


def extract_language_from_text_record(payload: bytes) -> str:
    """Return the language code of a Text record payload, "en" if absent."""
    if not payload:
        return _DEFAULT_LANGUAGE
    lang_len = payload[0] & 0x3F
    if lang_len > 0 and len(payload) > 1 + lang_len:
        return payload[1:1 + lang_len].decode("utf-8", errors="replace")
    return _DEFAULT_LANGUAGE


def record_to_builder(record: NDEFRecord) -> AnyRecordBuilder | None:
    """Convert a low-level record to its builder, or None if unrecognised."""
    if record.tnf == TNF_EMPTY:
        return NDEFEmpty()
    if record.tnf == TNF_WELL_KNOWN:
        try:
            if record.type == b"T":
                text = parse_text_record_payload(record.payload)
                return NDEFText(text, extract_language_from_text_record(record.payload))
            if record.type == b"U":
                return NDEFURI(parse_uri_record_payload(record.payload))
        except NDEFError:
            return None
        return None
    if record.tnf == TNF_MIME:
        return NDEFMIME(record.type.decode("utf-8", errors="replace"), bytes(record.payload))
    if record.tnf == TNF_EXTERNAL:
        return NDEFExternal(record.type.decode("utf-8", errors="replace"), bytes(record.payload))
    return None