#!/usr/bin/env python3
"""
Error types raised by ssign.

Every failure surfaced by the library is a SignatureError subclass, so
callers that only want to report the problem can catch the base class.
"""


class SignatureError(Exception):
    """Base class for all ssign errors."""


class FormatError(SignatureError):
    """Signature armor or binary envelope is structurally unparseable."""


class ValidationError(SignatureError):
    """Envelope parsed but was rejected (namespace, hash algorithm)."""


class VerificationFailed(SignatureError):
    """Signature does not match the message and public key."""

    def __init__(self, message: str = "signature verification failed"):
        super().__init__(message)


class SSHKeyError(SignatureError):
    """Key cannot be loaded or cannot be used for the requested operation."""


class PassphraseRequired(SSHKeyError):
    """Private key is encrypted and no passphrase was supplied."""
