"""Request descriptor and policy models consumed by the compiler."""
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence, Union
from .config import (
    MAX_TIME,
    CONNECT_TIMEOUT,
    USER_AGENT,
    TCP_FASTOPEN,
    TCP_NODELAY,
    DNS_SERVERS,
    DNS_CACHE_TTL,
    TLS12_CIPHERS,
    TLS13_CIPHERS,
)
from .proxy import ProxyConfig

CipherList = Union[str, Sequence[str]]


@dataclass(frozen=True)
class TlsPolicy:
    insecure: bool = False
    versions: Sequence[float] = (1.3, 1.2)
    # None means "use the GlobalPolicy default"
    ciphers_tls12: Optional[CipherList] = None
    ciphers_tls13: Optional[CipherList] = None


@dataclass(frozen=True)
class DnsPolicy:
    """
    DNS behaviour for one request.

    ``cache`` is True, False (do not use or fill the cache) or a TTL in
    seconds for the entry written after a fresh lookup. ``resolve``, when set,
    decides on its own whether the cache is read before looking up.
    """
    servers: Optional[Sequence[str]] = None
    cache: Union[bool, int] = True
    resolve: Optional[bool] = None


@dataclass(frozen=True)
class HttpPolicy:
    version: Optional[float] = None
    # False/0 disables keep-alive, an int sets the interval in seconds
    keep_alive: Union[bool, int, None] = None
    keep_alive_probes: Optional[int] = None


class RequestTransform(Protocol):
    """Hook that may rewrite a descriptor once, before compilation."""

    def rewrite(self, descriptor: "RequestDescriptor") -> "RequestDescriptor":
        ...


class NoopTransform:
    def rewrite(self, descriptor):
        return descriptor


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Everything needed to compile one curl invocation.

    Descriptors are never mutated; a transform returns a new one
    (typically via ``dataclasses.replace``).
    """
    url: str
    method: str = 'GET'
    headers: Any = None
    body: Any = None
    tls: TlsPolicy = field(default_factory=TlsPolicy)
    dns: DnsPolicy = field(default_factory=DnsPolicy)
    http: HttpPolicy = field(default_factory=HttpPolicy)
    proxy: Union[str, ProxyConfig, None] = None
    # None/False: do not follow, True: follow with the default limit, int: limit
    follow: Union[bool, int, None] = None
    compress: bool = False
    max_time: Optional[float] = None
    connect_timeout: Optional[float] = None
    transform: Optional[RequestTransform] = None
    skip_global_transform: bool = False


@dataclass(frozen=True)
class GlobalPolicy:
    """Process-wide defaults; built once at startup from the environment."""
    max_time: float = MAX_TIME
    connect_timeout: float = CONNECT_TIMEOUT
    user_agent: Optional[str] = USER_AGENT
    tcp_fastopen: bool = TCP_FASTOPEN
    tcp_nodelay: bool = TCP_NODELAY
    dns_servers: Sequence[str] = tuple(DNS_SERVERS)
    dns_cache_ttl: int = DNS_CACHE_TTL
    ciphers_tls12: CipherList = TLS12_CIPHERS
    ciphers_tls13: CipherList = TLS13_CIPHERS
    transform: RequestTransform = field(default_factory=NoopTransform)
