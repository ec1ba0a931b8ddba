"""Well-known MIFARE Classic authentication keys."""

DEFAULT_KEY_A: bytes = bytes((0xA0, 0xA1, 0xA2, 0xA3, 0xA4, 0xA5))
"""MIFARE Application default key A."""

DEFAULT_KEY_B: bytes = bytes((0xD3, 0xF7, 0xD3, 0xF7, 0xD3, 0xF7))
"""NFC Forum default key B."""

FACTORY_KEY: bytes = bytes((0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF))
"""MIFARE Classic factory default key."""

PUBLIC_KEY: bytes = DEFAULT_KEY_B
"""Common public key for NDEF applications."""

DEFAULT_KEYS: tuple[bytes, ...] = (
    FACTORY_KEY,
    DEFAULT_KEY_B,
    DEFAULT_KEY_A,
    bytes((0xB0, 0xB1, 0xB2, 0xB3, 0xB4, 0xB5)),
    bytes((0x4D, 0x3A, 0x99, 0xC3, 0x51, 0xDD)),
    bytes((0x1A, 0x98, 0x2C, 0x7E, 0x45, 0x9A)),
    bytes((0xAA, 0xBB, 0xCC, 0xDD, 0xEE, 0xFF)),
    bytes(6),  # blank key
)
"""Common keys to try, in order, when authenticating a sector."""