"""Unit tests for shared helpers."""
import pytest
from curlcmd.utils import (
    compare_versions,
    contains_alphabet,
    default_port,
    determine_content_type,
    has_json_structure,
    is_valid_ipv4,
)


@pytest.mark.parametrize("a,b,expected", [
    ("7.49.0", "7.49.0", 0),
    ("7.49", "7.49.0", 0),
    ("8.0.0", "7.99.99", 1),
    ("7.21.2", "7.21.3", -1),
    ("7.10.10", "7.9.99", 1),
    ("8.5.0-DEV", "8.5.0", 0),
    ("", "0.0.1", -1),
])
def test_compare_versions(a, b, expected):
    assert compare_versions(a, b) == expected


def test_contains_alphabet():
    assert contains_alphabet("api.example.com")
    assert not contains_alphabet("93.184.216.34")
    assert not contains_alphabet("")


@pytest.mark.parametrize("address,valid", [
    ("93.184.216.34", True),
    ("0.0.0.0", True),
    ("256.1.1.1", False),
    ("1.2.3", False),
    ("1", False),
    ("::1", False),
    ("example.com", False),
    (None, False),
])
def test_is_valid_ipv4(address, valid):
    assert is_valid_ipv4(address) is valid


def test_default_port():
    assert default_port("https") == 443
    assert default_port("http") == 80
    assert default_port("HTTPS:") == 443
    assert default_port("gopher") == 80


def test_has_json_structure():
    assert has_json_structure({"a": 1})
    assert has_json_structure([1, 2])
    assert has_json_structure('{"a": 1}')
    assert not has_json_structure('{not json')
    assert not has_json_structure("plain")
    assert not has_json_structure(42)


@pytest.mark.parametrize("text,expected", [
    ('{"a":1}', 'application/json'),
    ('[1,2,3]', 'application/json'),
    ('<!DOCTYPE html><html></html>', 'text/html'),
    ('<?xml version="1.0"?><a/>', 'application/xml'),
    ('<root><child/></root>', 'application/xml'),
    ('a=1&b=two', 'application/x-www-form-urlencoded'),
    ('hello world', 'text/plain'),
])
def test_determine_content_type(text, expected):
    assert determine_content_type(text) == expected
