"""Hostname resolvers used to pin DNS results into curl's --resolve."""
import asyncio
import socket
from typing import List, Protocol
from dnslib import DNSRecord, QTYPE
from .config import logger, BOOTSTRAP_DNS
from .utils import is_valid_ipv4

DNS_PORT = 53
MAX_UDP_SIZE = 512


class Resolver(Protocol):
    """Anything that can turn a hostname into a list of addresses."""

    async def lookup(self, hostname: str, family: int = socket.AF_INET) -> List[str]:
        ...


def query_a_records(hostname: str, server: str, timeout: float = 5.0) -> List[str]:
    """
    Send one A query for hostname straight to a DNS server over UDP.

    Returns every IPv4 address in the answer section, in answer order. An
    IPv4 literal is returned as-is without touching the network.

    Raises:
        OSError: the query could not be sent or timed out
        DNSError: the reply could not be parsed
    """
    if is_valid_ipv4(hostname):
        return [hostname]

    query = DNSRecord.question(hostname, "A")
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.settimeout(timeout)
        sock.sendto(query.pack(), (server, DNS_PORT))
        reply, _ = sock.recvfrom(MAX_UDP_SIZE)

    answers = [str(rr.rdata) for rr in DNSRecord.parse(reply).rr if rr.rtype == QTYPE.A]
    logger.debug(f"{hostname} via {server}: {answers or 'no A records'}")
    return answers


class SystemResolver:
    """Resolves through the operating system (getaddrinfo)."""

    async def lookup(self, hostname: str, family: int = socket.AF_INET) -> List[str]:
        loop = asyncio.get_running_loop()
        infos = await loop.getaddrinfo(hostname, None, family=family, type=socket.SOCK_STREAM)
        addresses = []
        for _, _, _, _, sockaddr in infos:
            if sockaddr[0] not in addresses:
                addresses.append(sockaddr[0])
        return addresses


class BootstrapResolver:
    """
    Resolves A records against a fixed DNS server, bypassing the system resolver.

    Only IPv4 is supported; other families return no addresses.
    """

    def __init__(self, bootstrap_dns: str = BOOTSTRAP_DNS):
        if not bootstrap_dns:
            raise ValueError("A bootstrap DNS server must be provided")
        self.bootstrap_dns = bootstrap_dns

    async def lookup(self, hostname: str, family: int = socket.AF_INET) -> List[str]:
        if family != socket.AF_INET:
            return []
        return await asyncio.to_thread(query_a_records, hostname, self.bootstrap_dns)


def default_resolver() -> Resolver:
    """BootstrapResolver when BOOTSTRAP_DNS is configured, else SystemResolver."""
    if BOOTSTRAP_DNS:
        return BootstrapResolver(BOOTSTRAP_DNS)
    return SystemResolver()
