[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nfcagent"
version = "0.1.0"
description = "NDEF message encoding and decoding, MIFARE key tables and aggregation of NFC device managers"
requires-python = ">=3.10"
dependencies = []
keywords = ["nfc", "ndef", "mifare", "rfid", "smartcard"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nfcagent"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
