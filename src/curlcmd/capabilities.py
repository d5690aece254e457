"""Detection of optional features supported by the installed curl build."""
import subprocess
from dataclasses import dataclass
from .config import logger, CURL_BINARY
from .utils import compare_versions

DNS_RESOLVE_SINCE = '7.21.3'
TCP_FASTOPEN_SINCE = '7.49.0'
TCP_NODELAY_SINCE = '7.11.2'

# TLS backends that honour --ciphers / --tls13-ciphers
CIPHER_BACKENDS = ('openssl', 'libressl', 'boringssl', 'quictls', 'wolfssl', 'gnutls')


@dataclass(frozen=True)
class CapabilitySet:
    """What the installed curl binary can do. Computed once, never mutated."""
    http2: bool = False
    dns_servers: bool = False
    dns_resolve: bool = False
    tcp_fastopen: bool = False
    tcp_nodelay: bool = False
    ciphers: bool = False


def detect(version: str, features: str) -> CapabilitySet:
    """
    Derive a CapabilitySet from curl's version and build information.

    Args:
        version: Version number reported by curl (e.g. "8.5.0")
        features: Remaining ``curl --version`` text (libraries, protocols, features)

    Returns:
        CapabilitySet; every flag is False when the input is empty or unrecognised
    """
    version = (version or '').strip()
    features = (features or '').lower()

    def at_least(minimum: str) -> bool:
        return bool(version) and compare_versions(version, minimum) >= 0

    return CapabilitySet(
        http2='http2' in features,
        dns_servers='c-ares' in features,
        dns_resolve=at_least(DNS_RESOLVE_SINCE),
        tcp_fastopen=at_least(TCP_FASTOPEN_SINCE),
        tcp_nodelay=at_least(TCP_NODELAY_SINCE),
        ciphers=any(lib in features for lib in CIPHER_BACKENDS),
    )


def parse_version_output(output: str) -> tuple[str, str]:
    """
    Split ``curl --version`` output into (version, features).

    The first line looks like ``curl 8.5.0 (x86_64-pc-linux-gnu) libcurl/8.5.0 OpenSSL/3.0.13``.
    Anything that does not start with "curl " yields ("", "").
    """
    lines = (output or '').strip().splitlines()
    if not lines:
        return '', ''
    head = lines[0].split()
    if len(head) < 2 or head[0].lower() != 'curl':
        return '', ''
    features = ' '.join([' '.join(head[2:])] + lines[1:])
    return head[1], features


def probe_capabilities(binary: str = CURL_BINARY) -> CapabilitySet:
    """
    Run ``<binary> --version`` and detect its capabilities.

    Meant to be called once at startup; the result is passed into every
    compile. A missing or failing binary degrades to the all-False set.
    """
    try:
        result = subprocess.run(
            [binary, '--version'],
            capture_output=True,
            text=True,
            timeout=5.0,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning(f"Could not query {binary} --version: {e}. Assuming no optional features.")
        return CapabilitySet()

    version, features = parse_version_output(result.stdout)
    capabilities = detect(version, features)
    logger.debug(f"Detected {binary} {version or '<unknown>'}: {capabilities}")
    return capabilities
