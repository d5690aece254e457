"""Small helpers shared by the compiler and body encoder."""
import ipaddress
import json
import re
from typing import Any

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
    'ws': 80,
    'wss': 443,
    'ftp': 21,
    'ftps': 990,
}

_URLENCODED_RE = re.compile(r'^[\w.~%+-]+=[^&]*(&[\w.~%+-]+=[^&]*)*$')


def _version_fields(version: str) -> list[int]:
    fields = []
    for part in version.strip().split('.'):
        digits = re.match(r'\d+', part)
        fields.append(int(digits.group()) if digits else 0)
    return fields


def compare_versions(a: str, b: str) -> int:
    """
    Compare two dotted version strings field by field.

    Missing or non-numeric fields count as 0, so "7.49" == "7.49.0".

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    left = _version_fields(a)
    right = _version_fields(b)
    width = max(len(left), len(right))
    left += [0] * (width - len(left))
    right += [0] * (width - len(right))
    for x, y in zip(left, right):
        if x != y:
            return 1 if x > y else -1
    return 0


def contains_alphabet(host: str) -> bool:
    """True when the host has letters, i.e. it is a name and not an IPv4 literal."""
    return any(c.isalpha() for c in host)


def is_valid_ipv4(address: Any) -> bool:
    """True only for a dotted-quad IPv4 string."""
    if not isinstance(address, str) or address.count('.') != 3:
        return False
    try:
        ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return True


def default_port(scheme: str) -> int:
    return DEFAULT_PORTS.get(scheme.lower().rstrip(':'), 80)


def has_json_structure(value: Any) -> bool:
    """
    Heuristic for "should this be sent as JSON".

    Dicts and lists qualify directly; strings qualify when they parse to an
    object or array.
    """
    if isinstance(value, (dict, list, tuple)):
        return True
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not text or text[0] not in '{[':
        return False
    try:
        parsed = json.loads(text)
    except ValueError:
        return False
    return isinstance(parsed, (dict, list))


def determine_content_type(text: str) -> str:
    """Sniff a content-type for a plain string body."""
    stripped = text.strip()
    if has_json_structure(stripped):
        return 'application/json'
    lowered = stripped[:64].lower()
    if lowered.startswith('<!doctype html') or lowered.startswith('<html'):
        return 'text/html'
    if lowered.startswith('<?xml') or (lowered.startswith('<') and stripped.endswith('>')):
        return 'application/xml'
    if _URLENCODED_RE.match(stripped):
        return 'application/x-www-form-urlencoded'
    return 'text/plain'
