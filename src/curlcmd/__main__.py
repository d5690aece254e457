"""Command line entry point: compile a request and print the curl command."""
import argparse
import asyncio
import json
import os
import shlex
import sys
import httpx
from .body import FormFile, JsonBody, MultipartBody, TextBody
from .capabilities import probe_capabilities
from .compiler import CommandCompiler
from .config import CURL_BINARY
from .models import DnsPolicy, HttpPolicy, RequestDescriptor, TlsPolicy

__all__ = ['main']


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='curlcmd',
        description='Compile an HTTP request into a curl command line.',
    )
    parser.add_argument('url')
    parser.add_argument('-X', '--request', dest='method', default=None)
    parser.add_argument('-H', '--header', dest='headers', action='append', default=[],
                        help='"Name: value", may be repeated')
    body = parser.add_mutually_exclusive_group()
    body.add_argument('-d', '--data', default=None, help='raw text body')
    body.add_argument('--json', default=None, help='JSON body')
    body.add_argument('-F', '--form', action='append', default=None,
                      help='multipart field name=value, or name=@path for a file')
    parser.add_argument('-L', '--location', action='store_true', help='follow redirects')
    parser.add_argument('--max-redirs', type=int, default=None)
    parser.add_argument('-k', '--insecure', action='store_true')
    parser.add_argument('--compressed', action='store_true')
    parser.add_argument('-x', '--proxy', default=None)
    parser.add_argument('--http1.1', dest='http_version', action='store_const', const=1.1)
    parser.add_argument('--http2', dest='http_version', action='store_const', const=2.0)
    parser.add_argument('--no-dns-cache', action='store_true')
    parser.add_argument('-m', '--max-time', type=float, default=None)
    parser.add_argument('--connect-timeout', type=float, default=None)
    parser.add_argument('--binary', default=CURL_BINARY, help='curl executable to probe and emit')
    return parser


def _parse_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(':')
    if not sep or not name.strip():
        raise ValueError(f"Invalid header {raw!r}, expected 'Name: value'")
    return name.strip(), value.strip()


def _parse_form_field(raw: str):
    name, sep, value = raw.partition('=')
    if not sep or not name:
        raise ValueError(f"Invalid form field {raw!r}, expected name=value")
    if value.startswith('@'):
        path = value[1:]
        with open(path, 'rb') as f:
            return name, FormFile(f.read(), filename=os.path.basename(path))
    return name, value


def descriptor_from_args(args: argparse.Namespace) -> RequestDescriptor:
    headers = [_parse_header(h) for h in args.headers]

    body = None
    if args.form:
        body = MultipartBody([_parse_form_field(f) for f in args.form])
    elif args.json is not None:
        body = JsonBody(json.loads(args.json))
    elif args.data is not None:
        body = TextBody(args.data)

    method = args.method or ('POST' if body is not None else 'GET')
    follow = None
    if args.location:
        follow = args.max_redirs if args.max_redirs is not None else True

    return RequestDescriptor(
        url=args.url,
        method=method,
        headers=headers,
        body=body,
        tls=TlsPolicy(insecure=args.insecure),
        dns=DnsPolicy(cache=not args.no_dns_cache),
        http=HttpPolicy(version=args.http_version),
        proxy=args.proxy,
        follow=follow,
        compress=args.compressed,
        max_time=args.max_time,
        connect_timeout=args.connect_timeout,
    )


async def run(argv=None) -> list:
    args = build_parser().parse_args(argv)
    descriptor = descriptor_from_args(args)
    compiler = CommandCompiler(probe_capabilities(args.binary), binary=args.binary)
    return await compiler.compile(descriptor)


def main(argv=None):
    """Main entry point for the curlcmd console script."""
    try:
        command = asyncio.run(run(argv))
    except KeyboardInterrupt:
        return 130
    except (ValueError, OSError, httpx.InvalidURL) as e:
        print(f"curlcmd: {e}", file=sys.stderr)
        return 2
    print(shlex.join(command))
    return 0


if __name__ == "__main__":
    sys.exit(main())
