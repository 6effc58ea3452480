"""
Value Classifier Module

Detects the structural type of a raw string value taken from a manifest
(ConfigMap data, Secret stringData, annotations, ...).
"""

import base64
import binascii
import json
import math
import re
from enum import Enum
from typing import Any, Optional
from xml.dom import minidom
from xml.parsers.expat import ExpatError

from ..constants import MIN_BASE64_LENGTH

BASE64_PATTERN = re.compile(r'^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$')


class DataType(str, Enum):
    """Detected type of a raw value"""

    TEXT = 'text'
    JSON = 'json'
    XML = 'xml'
    BINARY = 'binary'

    @property
    def extension(self) -> str:
        return {
            DataType.JSON: 'json',
            DataType.XML: 'xml',
            DataType.BINARY: 'bin',
        }.get(self, 'txt')


def _reject_constant(name: str):
    raise ValueError(f"non-JSON constant {name}")


def _parse_finite_float(text: str) -> float:
    number = float(text)
    if math.isinf(number):
        raise ValueError(f"number out of range: {text}")
    return number


def parse_json_document(value: str) -> Optional[Any]:
    """Return the decoded object if value is a JSON object or array.

    Bare scalars ('42', 'true', '"quoted"') are not documents and yield None.
    NaN, Infinity and numbers that overflow a float are rejected.
    """
    stripped = value.strip()
    if not stripped or stripped[0] not in '{[':
        return None
    try:
        decoded = json.loads(stripped, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    except ValueError:
        return None
    if isinstance(decoded, (dict, list)):
        return decoded
    return None


def parse_xml_document(value: str) -> Optional[minidom.Document]:
    """Return the parsed DOM if value is a well-formed XML document"""
    stripped = value.strip()
    if not stripped.startswith('<'):
        return None
    try:
        return minidom.parseString(stripped)
    except (ExpatError, ValueError):
        return None


def decode_base64(value: str) -> Optional[bytes]:
    """Strictly decode standard base64, ignoring line breaks.

    Returns None when the alphabet or padding is wrong.
    """
    compact = value.replace('\r', '').replace('\n', '')
    if len(compact) < MIN_BASE64_LENGTH or not BASE64_PATTERN.match(compact):
        return None
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        return None


def is_utf8_text(data: bytes) -> bool:
    try:
        data.decode('utf-8')
    except UnicodeDecodeError:
        return False
    return True


def detect_type(value: str) -> DataType:
    """Classify a raw string value.

    Checks run in order and the first match wins:

    1. JSON object or array (bare JSON scalars are plain text)
    2. Well-formed XML document
    3. Base64 whose decoded bytes are not valid UTF-8
    4. Plain text

    Base64 that decodes to readable UTF-8 is classified as text.

    Args:
        value: Raw string value

    Returns:
        Detected DataType
    """
    if not value:
        return DataType.TEXT

    if parse_json_document(value) is not None:
        return DataType.JSON

    if parse_xml_document(value) is not None:
        return DataType.XML

    decoded = decode_base64(value)
    if decoded is not None and not is_utf8_text(decoded):
        return DataType.BINARY

    return DataType.TEXT
