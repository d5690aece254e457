"""Exceptions raised while compiling a curl command."""


class CurlCmdError(Exception):
    """Base class for curlcmd errors."""


class BodyEncodingError(CurlCmdError, ValueError):
    """The request body has a shape that cannot be encoded."""
