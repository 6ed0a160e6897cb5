#!/usr/bin/env python3
"""
Exceptions raised by the WildFire utility
"""


class WildFireError(Exception):
    """Base exception for WildFire utility errors"""
    pass


class WildFireRequestError(WildFireError):
    """The request never produced an HTTP response (connection, TLS, timeout)"""
    pass


class ResponseFormatError(WildFireError):
    """The response body is not well-formed or lacks the expected result section"""
    pass


class ParameterError(WildFireError):
    """A command line parameter failed validation"""
    pass
