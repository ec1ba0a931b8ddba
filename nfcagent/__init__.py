"""NDEF message encoding and decoding, MIFARE key tables and NFC device manager aggregation."""

__version__ = "0.1.0"
__all__ = ["keys", "ndef", "message", "multimanager"]