"""Compiles a RequestDescriptor into the argv of one curl invocation."""
import collections.abc
import socket
from typing import Any, Callable, List, Optional
import httpx
from . import flags
from .body import BlobBody, coerce_body, encode_body
from .cache import DNSCache
from .capabilities import CapabilitySet
from .config import logger, CURL_BINARY
from .models import DnsPolicy, GlobalPolicy, RequestDescriptor
from .proxy import format_proxy_string
from .resolver import Resolver, default_resolver
from .utils import contains_alphabet, default_port, determine_content_type, is_valid_ipv4


def _number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _join_ciphers(ciphers: Any) -> str:
    if isinstance(ciphers, str):
        return ciphers
    return ':'.join(ciphers)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def normalize_headers(headers: Any) -> httpx.Headers:
    """
    Build a case-insensitive header collection, keeping duplicates in order.

    An ``httpx.Headers`` instance is copied as-is; mappings and sequences of
    pairs drop None values and stringify the rest.
    """
    if headers is None:
        return httpx.Headers()
    if isinstance(headers, httpx.Headers):
        return httpx.Headers(headers)
    if isinstance(headers, collections.abc.Mapping):
        pairs = headers.items()
    else:
        pairs = headers
    return httpx.Headers([(key, str(value)) for key, value in pairs if value is not None])


def encode_url(url: str) -> str:
    """Percent-encode brackets so curl does not treat them as URL globbing ranges."""
    return url.replace('[', '%5B').replace(']', '%5D')


class CommandCompiler:
    """
    Turns request descriptors into curl argument lists.

    The capability set, global policy and DNS cache are shared by every
    compile; nothing else is kept between calls.
    """

    def __init__(
        self,
        capabilities: CapabilitySet,
        policy: Optional[GlobalPolicy] = None,
        cache: Optional[DNSCache] = None,
        resolver: Optional[Resolver] = None,
        proxy_formatter: Callable[[Any], str] = format_proxy_string,
        classifier: Callable[[str], str] = determine_content_type,
        binary: str = CURL_BINARY,
    ):
        self.capabilities = capabilities
        self.policy = policy if policy is not None else GlobalPolicy()
        self.cache = cache if cache is not None else DNSCache(default_ttl=self.policy.dns_cache_ttl)
        self.resolver = resolver if resolver is not None else default_resolver()
        self.proxy_formatter = proxy_formatter
        self.classifier = classifier
        self.binary = binary

    def _apply_transform(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        if descriptor.transform is not None:
            return descriptor.transform.rewrite(descriptor)
        if not descriptor.skip_global_transform and self.policy.transform is not None:
            return self.policy.transform.rewrite(descriptor)
        return descriptor

    def _http_version(self, descriptor: RequestDescriptor) -> float:
        version = descriptor.http.version
        if version is None:
            return 2.0 if self.capabilities.http2 else 1.1
        version = float(version)
        if version not in flags.HTTP_VERSION:
            raise ValueError(f"Unsupported HTTP version: {descriptor.http.version}")
        if version == 2.0 and not self.capabilities.http2:
            logger.debug("HTTP/2 requested but not supported by curl, using HTTP/1.1")
            return 1.1
        return version

    async def resolve_host(self, host: str, dns: DnsPolicy) -> Optional[str]:
        """
        Resolve host for --resolve pinning, through the cache when allowed.

        A fresh lookup result is written back unless caching is disabled,
        even when the cache read was skipped via ``dns.resolve=False``.
        Returns None when no valid IPv4 address is available.
        """
        use_cache = dns.resolve if dns.resolve is not None else dns.cache is not False
        cached = self.cache.get(host) if use_cache else None
        address = cached

        if not address:
            try:
                addresses = await self.resolver.lookup(host, socket.AF_INET)
            except Exception as e:
                logger.warning(f"DNS lookup for {host} failed: {e}. Skipping --resolve.")
                return None
            address = addresses[0] if addresses else None

        if not is_valid_ipv4(address):
            logger.debug(f"No usable IPv4 address for {host}, skipping --resolve")
            return None

        if dns.cache is not False and not cached:
            ttl = dns.cache if _is_count(dns.cache) else self.policy.dns_cache_ttl
            self.cache.set(host, address, ttl)
            logger.debug(f"[DNS] {host} -> {address} (cached for {ttl}s)")
        elif cached:
            logger.debug(f"[DNS CACHE] {host} -> {address}")
        return address

    async def compile(self, descriptor: RequestDescriptor) -> List[str]:
        """
        Compile a descriptor into curl's argv.

        Raises:
            BodyEncodingError: the body cannot be encoded
            Exception: anything raised by a transform hook, unmodified
        """
        descriptor = self._apply_transform(descriptor)

        caps = self.capabilities
        policy = self.policy
        tls = descriptor.tls
        http = descriptor.http
        url = httpx.URL(descriptor.url)

        max_time = descriptor.max_time if descriptor.max_time is not None else policy.max_time
        connect_timeout = (
            descriptor.connect_timeout if descriptor.connect_timeout is not None else policy.connect_timeout
        )
        http_version = self._http_version(descriptor)

        command = [
            self.binary,
            flags.INFO,
            flags.SILENT,
            flags.SHOW_ERROR,
            flags.WRITE_OUT,
            flags.WRITE_OUT_FORMAT,
            flags.TIMEOUT,
            _number(max_time),
            flags.CONNECT_TIMEOUT,
            _number(connect_timeout),
            flags.HTTP_VERSION[http_version],
        ]

        if tls.insecure:
            command.append(flags.INSECURE)

        # TLS versions and ciphers
        if 1.2 in tls.versions:
            command.append(flags.TLSV1_2)
            if caps.ciphers:
                ciphers = tls.ciphers_tls12 if tls.ciphers_tls12 is not None else policy.ciphers_tls12
                command.extend([flags.CIPHERS, _join_ciphers(ciphers)])

        if 1.3 in tls.versions:
            if 1.2 in tls.versions:
                command.extend([flags.TLS_MAX, '1.3'])
            else:
                command.append(flags.TLSV1_3)
            if caps.ciphers:
                ciphers = tls.ciphers_tls13 if tls.ciphers_tls13 is not None else policy.ciphers_tls13
                command.extend([flags.TLS13_CIPHERS, _join_ciphers(ciphers)])

        if descriptor.compress:
            command.append(flags.COMPRESSED)

        # DNS servers and pinning
        dns_servers = descriptor.dns.servers if descriptor.dns.servers is not None else policy.dns_servers
        if caps.dns_servers and dns_servers:
            command.extend([flags.DNS_SERVERS, ','.join(dns_servers)])

        host = url.raw_host.decode('ascii')
        if caps.dns_resolve and contains_alphabet(host) and ':' not in host:
            address = await self.resolve_host(host, descriptor.dns)
            if address:
                port = url.port or default_port(url.scheme)
                command.extend([flags.DNS_RESOLVE, f"{host}:{port}:{address}"])

        # TCP options
        if policy.tcp_fastopen and http_version != 1.1 and not http.keep_alive and caps.tcp_fastopen:
            command.append(flags.TCP_FASTOPEN)

        if policy.tcp_nodelay and caps.tcp_nodelay:
            command.append(flags.TCP_NODELAY)

        if descriptor.proxy:
            command.extend([flags.PROXY, self.proxy_formatter(descriptor.proxy)])

        # Redirects
        if descriptor.follow is not None and descriptor.follow is not False:
            max_redirs = descriptor.follow if _is_count(descriptor.follow) else flags.DEFAULT_MAX_REDIRS
            command.extend([flags.FOLLOW, flags.MAX_REDIRS, str(max_redirs)])

        # Keep-alive only applies to HTTP/1.1 connections
        if http_version == 1.1:
            if http.keep_alive is not None and http.keep_alive == 0:
                command.append(flags.NO_KEEPALIVE)
            elif _is_count(http.keep_alive):
                command.extend([flags.KEEPALIVE_TIME, str(http.keep_alive)])
            if _is_count(http.keep_alive_probes):
                command.extend([flags.KEEPALIVE_CNT, str(http.keep_alive_probes)])

        # Headers and body
        headers = normalize_headers(descriptor.headers)

        body = coerce_body(descriptor.body)
        if body is not None:
            encoded = await encode_body(body, self.classifier)
            content_type = encoded.content_type
            if content_type is None and isinstance(body, BlobBody):
                content_type = body.content_type
            if content_type and 'content-type' not in headers:
                headers['content-type'] = content_type
            payload = encoded.payload
            if isinstance(payload, bytes):
                # surrogateescape lets subprocess restore the exact bytes on POSIX
                payload = payload.decode('utf-8', 'surrogateescape')
            command.extend([flags.DATA_RAW, payload])

        if 'user-agent' not in headers and policy.user_agent:
            command.extend([flags.USER_AGENT, policy.user_agent])

        for key, value in headers.multi_items():
            command.extend([flags.HEADER, f"{key}: {value}"])

        command.extend([flags.METHOD, descriptor.method.upper()])
        command.append(encode_url(descriptor.url))

        return command
