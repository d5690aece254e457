"""Unit tests for the resolver module."""
import socket
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from dnslib import DNSRecord, QTYPE, RR, A, CNAME
from curlcmd.resolver import (
    BootstrapResolver,
    SystemResolver,
    default_resolver,
    query_a_records,
)


def _mock_socket(response_bytes=None, side_effect=None):
    mock_socket = MagicMock()
    mock_socket.__enter__.return_value = mock_socket
    if side_effect is not None:
        mock_socket.recvfrom.side_effect = side_effect
    else:
        mock_socket.recvfrom.return_value = (response_bytes, ("8.8.8.8", 53))
    return mock_socket


def test_query_a_records_already_ip():
    """Test that IPv4 literals are returned without a query."""
    with patch('socket.socket') as mock_sock_cls:
        assert query_a_records("1.1.1.1", "8.8.8.8") == ["1.1.1.1"]
    mock_sock_cls.assert_not_called()


def test_query_a_records_success():
    """Test successful hostname resolution."""
    dns_query = DNSRecord.question("example.com", "A")
    dns_response = dns_query.reply()
    dns_response.add_answer(RR("example.com", QTYPE.A, rdata=A("93.184.216.34"), ttl=300))
    mock_socket = _mock_socket(dns_response.pack())

    with patch('socket.socket', return_value=mock_socket):
        result = query_a_records("example.com", "8.8.8.8")

    assert result == ["93.184.216.34"]
    mock_socket.settimeout.assert_called_once_with(5.0)
    mock_socket.sendto.assert_called_once()
    assert mock_socket.sendto.call_args.args[1] == ("8.8.8.8", 53)
    mock_socket.__exit__.assert_called_once()


def test_query_a_records_returns_every_a_record():
    """Test that CNAMEs are skipped and all A answers are kept in order."""
    dns_query = DNSRecord.question("www.example.com", "A")
    dns_response = dns_query.reply()
    dns_response.add_answer(RR("www.example.com", QTYPE.CNAME, rdata=CNAME("example.com"), ttl=300))
    dns_response.add_answer(RR("example.com", QTYPE.A, rdata=A("93.184.216.34"), ttl=300))
    dns_response.add_answer(RR("example.com", QTYPE.A, rdata=A("93.184.216.35"), ttl=300))
    mock_socket = _mock_socket(dns_response.pack())

    with patch('socket.socket', return_value=mock_socket):
        assert query_a_records("www.example.com", "8.8.8.8") == ["93.184.216.34", "93.184.216.35"]


def test_query_a_records_no_answers():
    """Test handling of a response with no answers."""
    dns_query = DNSRecord.question("nonexistent.example.com", "A")
    mock_socket = _mock_socket(dns_query.reply().pack())

    with patch('socket.socket', return_value=mock_socket):
        assert query_a_records("nonexistent.example.com", "8.8.8.8") == []


def test_query_a_records_timeout_propagates():
    """Test that a socket timeout reaches the caller."""
    mock_socket = _mock_socket(side_effect=socket.timeout("Timeout"))

    with patch('socket.socket', return_value=mock_socket):
        with pytest.raises(socket.timeout):
            query_a_records("timeout.example.com", "8.8.8.8")
    mock_socket.__exit__.assert_called_once()


@pytest.mark.asyncio
async def test_bootstrap_resolver_lookup():
    """Test that BootstrapResolver returns the queried addresses."""
    resolver = BootstrapResolver("9.9.9.9")
    with patch('curlcmd.resolver.query_a_records', return_value=["10.0.0.5", "10.0.0.6"]) as mock_query:
        result = await resolver.lookup("api.example.com", socket.AF_INET)

    assert result == ["10.0.0.5", "10.0.0.6"]
    mock_query.assert_called_once_with("api.example.com", "9.9.9.9")


@pytest.mark.asyncio
async def test_bootstrap_resolver_no_answers_is_empty():
    resolver = BootstrapResolver("9.9.9.9")
    with patch('curlcmd.resolver.query_a_records', return_value=[]):
        assert await resolver.lookup("nx.example.com") == []


@pytest.mark.asyncio
async def test_bootstrap_resolver_ipv6_unsupported():
    resolver = BootstrapResolver("9.9.9.9")
    with patch('curlcmd.resolver.query_a_records') as mock_query:
        assert await resolver.lookup("api.example.com", socket.AF_INET6) == []
    mock_query.assert_not_called()


def test_bootstrap_resolver_requires_server():
    with pytest.raises(ValueError):
        BootstrapResolver("")


@pytest.mark.asyncio
async def test_system_resolver_deduplicates():
    """Test that getaddrinfo results are flattened to unique addresses in order."""
    infos = [
        (socket.AF_INET, socket.SOCK_STREAM, 6, '', ("93.184.216.34", 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, '', ("93.184.216.35", 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, '', ("93.184.216.34", 0)),
    ]
    resolver = SystemResolver()
    mock_loop = MagicMock()
    mock_loop.getaddrinfo = AsyncMock(return_value=infos)

    with patch('curlcmd.resolver.asyncio.get_running_loop', return_value=mock_loop):
        result = await resolver.lookup("example.com", socket.AF_INET)

    assert result == ["93.184.216.34", "93.184.216.35"]
    mock_loop.getaddrinfo.assert_awaited_once_with(
        "example.com", None, family=socket.AF_INET, type=socket.SOCK_STREAM
    )


def test_default_resolver_selection():
    with patch('curlcmd.resolver.BOOTSTRAP_DNS', ''):
        assert isinstance(default_resolver(), SystemResolver)
    with patch('curlcmd.resolver.BOOTSTRAP_DNS', '8.8.8.8'):
        resolver = default_resolver()
        assert isinstance(resolver, BootstrapResolver)
        assert resolver.bootstrap_dns == '8.8.8.8'
