"""Proxy configuration and its curl -x string form."""
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote


@dataclass(frozen=True)
class ProxyConfig:
    """A proxy endpoint, optionally with credentials."""
    host: str
    port: int
    protocol: str = 'http'
    username: Optional[str] = None
    password: Optional[str] = None


def format_proxy_string(proxy: Union[str, ProxyConfig]) -> str:
    """
    Format a proxy for curl's -x flag.

    Strings are passed through unchanged. A ProxyConfig becomes
    ``protocol://[user[:password]@]host:port`` with credentials percent-encoded.
    """
    if isinstance(proxy, str):
        return proxy

    protocol = proxy.protocol.rstrip(':/') or 'http'
    auth = ''
    if proxy.username:
        auth = quote(proxy.username, safe='')
        if proxy.password is not None:
            auth += ':' + quote(proxy.password, safe='')
        auth += '@'
    return f"{protocol}://{auth}{proxy.host}:{proxy.port}"
