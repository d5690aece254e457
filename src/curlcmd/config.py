"""Configuration module for curlcmd."""
import os
import logging

# --- Configuration ---
CURL_BINARY = os.getenv('CURL_BINARY', 'curl')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

DNS_CACHE_ENABLED = os.getenv('DNS_CACHE_ENABLED', 'true').lower() == 'true'
DNS_CACHE_MAX_ITEMS = int(os.getenv('DNS_CACHE_MAX_ITEMS', 255))
DNS_CACHE_TTL = int(os.getenv('DNS_CACHE_TTL', 300))

# Empty means "use the system resolver"
BOOTSTRAP_DNS = os.getenv('BOOTSTRAP_DNS', '').strip()

# DNS_SERVERS is a comma-separated list handed to curl's --dns-servers
_dns_servers_env = os.getenv('DNS_SERVERS', '1.1.1.1,1.0.0.1')
DNS_SERVERS = [s.strip() for s in _dns_servers_env.split(',') if s.strip()]

MAX_TIME = float(os.getenv('MAX_TIME', 10))
CONNECT_TIMEOUT = float(os.getenv('CONNECT_TIMEOUT', 5))
USER_AGENT = os.getenv('USER_AGENT', '') or None

TCP_FASTOPEN = os.getenv('TCP_FASTOPEN', 'false').lower() == 'true'
TCP_NODELAY = os.getenv('TCP_NODELAY', 'false').lower() == 'true'

TLS12_CIPHERS = os.getenv(
    'TLS12_CIPHERS',
    'ECDHE-ECDSA-AES128-GCM-SHA256:ECDHE-RSA-AES128-GCM-SHA256:'
    'ECDHE-ECDSA-AES256-GCM-SHA384:ECDHE-RSA-AES256-GCM-SHA384:'
    'ECDHE-ECDSA-CHACHA20-POLY1305:ECDHE-RSA-CHACHA20-POLY1305'
)
TLS13_CIPHERS = os.getenv(
    'TLS13_CIPHERS',
    'TLS_AES_128_GCM_SHA256:TLS_AES_256_GCM_SHA384:TLS_CHACHA20_POLY1305_SHA256'
)

# --- Logging Setup ---
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger("curlcmd")
