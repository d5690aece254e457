"""Tests for the command line entry point."""
import shlex
import pytest
from unittest.mock import patch
from curlcmd.__main__ import build_parser, descriptor_from_args, main
from curlcmd.body import FormFile, JsonBody, MultipartBody, TextBody
from curlcmd.capabilities import CapabilitySet


def parse(*argv):
    return descriptor_from_args(build_parser().parse_args(list(argv)))


def test_defaults_to_get():
    descriptor = parse("https://example.com/")
    assert descriptor.method == "GET"
    assert descriptor.body is None
    assert descriptor.follow is None
    assert descriptor.dns.cache is True


def test_data_implies_post():
    descriptor = parse("https://example.com/", "-d", "hello", "-H", "X-A: 1", "-H", "X-A: 2")
    assert descriptor.method == "POST"
    assert descriptor.body == TextBody("hello")
    assert descriptor.headers == [("X-A", "1"), ("X-A", "2")]


def test_json_and_options():
    descriptor = parse(
        "https://example.com/", "--json", '{"a": 1}', "-X", "PUT", "-L", "--max-redirs", "4",
        "-k", "--compressed", "--http1.1", "--no-dns-cache", "-x", "http://proxy:3128",
    )
    assert descriptor.method == "PUT"
    assert descriptor.body == JsonBody({"a": 1})
    assert descriptor.follow == 4
    assert descriptor.tls.insecure is True
    assert descriptor.compress is True
    assert descriptor.http.version == 1.1
    assert descriptor.dns.cache is False
    assert descriptor.proxy == "http://proxy:3128"


def test_form_fields(tmp_path):
    upload = tmp_path / "photo.png"
    upload.write_bytes(b"\x89PNG")
    descriptor = parse("https://example.com/", "-F", "name=foo", "-F", f"file=@{upload}")
    assert descriptor.body == MultipartBody([
        ("name", "foo"),
        ("file", FormFile(b"\x89PNG", filename="photo.png")),
    ])


def test_invalid_header():
    with pytest.raises(ValueError):
        parse("https://example.com/", "-H", "no-colon")


@patch('curlcmd.__main__.probe_capabilities', return_value=CapabilitySet())
def test_main_prints_command(mock_probe, capsys):
    exit_code = main(["https://10.0.0.1/a[1]", "-X", "delete"])

    assert exit_code == 0
    printed = shlex.split(capsys.readouterr().out)
    assert printed[0] == "curl"
    assert printed[-3:] == ["-X", "DELETE", "https://10.0.0.1/a%5B1%5D"]
    mock_probe.assert_called_once_with("curl")


@patch('curlcmd.__main__.probe_capabilities', return_value=CapabilitySet())
def test_main_reports_bad_input(mock_probe, capsys):
    exit_code = main(["https://example.com/", "--json", "{broken"])

    assert exit_code == 2
    assert "curlcmd:" in capsys.readouterr().err
