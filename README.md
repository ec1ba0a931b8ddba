# nfcagent

Tools for working with NFC tag data from Python:

- `nfcagent.ndef`: encode and parse NDEF messages at the record level,
  including short and long records and records that carry an ID.
- `nfcagent.message`: build NDEF messages from high-level record builders
  (text, URI, MIME, external, empty), convert between builders, records and a
  JSON-friendly form, and wrap raw non-NDEF card data.
- `nfcagent.keys`: the common MIFARE Classic keys to try when authenticating.
- `nfcagent.multimanager`: put several device managers behind one interface,
  with devices addressed as `manager:device`.

The package has no third-party dependencies and supports Python 3.10 and later.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## NDEF records

```python
from nfcagent.ndef import (
    NDEFRecord,
    encode_ndef_message_with_text_record,
    encode_ndef_records,
    make_uri_record_payload,
    parse_ndef_message_for_text_record,
    parse_ndef_records,
)

raw = encode_ndef_message_with_text_record("Hello NFC World!", "en")
assert parse_ndef_message_for_text_record(raw) == "Hello NFC World!"

records = [NDEFRecord(tnf=0x01, type=b"U", payload=make_uri_record_payload("https://example.com"))]
data = encode_ndef_records(records)
assert parse_ndef_records(data)[0].get_uri() == "https://example.com"
```

`NDEFRecord` is a frozen dataclass with `tnf`, `type`, `id` and `payload`.
Its `get_text()` and `get_uri()` return `None` when the record is not of that
kind. URI payloads with the prefix codes `0x01` to `0x04` are expanded to
`http://www.`, `https://www.`, `http://` and `https://`. Text payloads flagged
as UTF-16 are decoded as little-endian and stripped of surrounding whitespace.

`parse_ndef_message_for_text_record` and `parse_ndef_message_for_uri_record`
return `""` for empty input or when no matching record exists. Empty,
malformed or truncated data given to `parse_ndef_records`, and an empty list
given to `encode_ndef_records`, raise `NDEFError` (a `ValueError`).

## Building messages

```python
from nfcagent.message import NDEFMessageBuilder, NDEFText, NDEFURI, decode_ndef

builder = NDEFMessageBuilder([
    NDEFText("Hello World", "en"),
    NDEFURI("https://example.com"),
])
message = builder.build()
data = message.encode()

decoded = decode_ndef(data)
assert decoded.get_text() == "Hello World"
assert decoded.get_uri() == "https://example.com"

# Edit an existing message declaratively
edit = decoded.to_builder()
edit.records.append(NDEFText("Another line"))
updated = edit.build()

print(updated.to_json_map())
```

- `NDEFMessage` supports `add_record`, `add_text` and `add_uri` (each returns
  the message, so calls chain), `records()`, `len()` and iteration.
- `NDEFMessage.get_text()` / `get_uri()` raise `NDEFError` when the message has
  no such record; `encode()` raises it for an empty message, and
  `NDEFMessageBuilder.build()` raises it when there are no records.
- `to_builder()` drops records it does not recognise (TNF values other than
  empty, well-known `T`/`U`, MIME and external).
- `to_payload()` returns an `NDEFMessagePayload`; `to_json_map()` returns a
  plain dict in which each record's raw payload is base64-encoded and empty
  `content`, `language` and `id` fields are left out.
- `decode_text(data)` and `TextMessage.from_string(text)` wrap raw card data
  that is not NDEF; `TextMessage.encode()` returns the bytes unchanged.

## Combining device managers

Any object with `open_device(device_str)` and `list_devices()` acts as a
`Manager`.

```python
from nfcagent.multimanager import ManagerEntry, MultiManager


class StaticManager:
    def __init__(self, devices):
        self.devices = devices

    def open_device(self, device_str):
        if device_str not in self.devices:
            raise LookupError(device_str)
        return device_str

    def list_devices(self):
        return list(self.devices)


mm = MultiManager(
    ManagerEntry("hardware", StaticManager(["reader0"])),
    ManagerEntry("smartphone", StaticManager(["phone1"])),
)

mm.list_devices()                         # ["hardware:reader0", "smartphone:phone1"]
mm.open_device("hardware:reader0")        # explicit manager
mm.open_device("phone1")                  # tries each manager in order
```

- A device string whose part before the first colon is not a registered
  manager name, such as `acr122_usb:001:003`, is passed unchanged to every
  manager in turn.
- Device names that already contain a colon are listed as they are; a manager
  whose `list_devices()` raises is logged and skipped.
- `add_manager`, `remove_manager`, `get_manager`, `manager_count` and
  `manager_names` manage the registry; names keep their registration order.
  Registration problems and failed opens raise `ManagerError`.
- For managers given at construction that provide `device_changes()` returning
  a `queue.Queue`, change signals are forwarded to the queue returned by
  `MultiManager.device_changes()`. `close()` stops forwarding and calls
  `close()` on every manager that has one.

## Keys

```python
from nfcagent.keys import DEFAULT_KEY_A, DEFAULT_KEY_B, DEFAULT_KEYS, FACTORY_KEY, PUBLIC_KEY
```

`DEFAULT_KEYS` is a tuple of six-byte keys in the order they are usually
tried: factory key, NFC Forum key B, MIFARE application key A, then a few
other common keys and the all-zero key.

## What this package does not do

It does not talk to readers or cards. There is no PC/SC or other hardware
backend, no background polling for tags, no tag read/write logic and no
command-line tool or server: managers and devices come from your own code,
and `nfcagent` works with the data and the manager objects you give it.