"""curl command-line flags emitted by the compiler."""

INFO = '-i'
SILENT = '-s'
SHOW_ERROR = '-S'
WRITE_OUT = '-w'
WRITE_OUT_FORMAT = '\nFinal-Url:%{url_effective}'
TIMEOUT = '-m'
CONNECT_TIMEOUT = '--connect-timeout'

HTTP_VERSION = {
    1.0: '--http1.0',
    1.1: '--http1.1',
    2.0: '--http2',
    3.0: '--http3',
}

INSECURE = '-k'
TLSV1_2 = '--tlsv1.2'
TLSV1_3 = '--tlsv1.3'
TLS_MAX = '--tls-max'
CIPHERS = '--ciphers'
TLS13_CIPHERS = '--tls13-ciphers'

COMPRESSED = '--compressed'
DNS_SERVERS = '--dns-servers'
DNS_RESOLVE = '--resolve'
TCP_FASTOPEN = '--tcp-fastopen'
TCP_NODELAY = '--tcp-nodelay'
PROXY = '-x'

FOLLOW = '-L'
MAX_REDIRS = '--max-redirs'
DEFAULT_MAX_REDIRS = 10

NO_KEEPALIVE = '--no-keepalive'
KEEPALIVE_TIME = '--keepalive-time'
KEEPALIVE_CNT = '--keepalive-cnt'

DATA_RAW = '--data-raw'
USER_AGENT = '-A'
HEADER = '-H'
METHOD = '-X'
