#!/usr/bin/env python3
"""
SSHSIG signing and verification.

The key never signs the raw message. It signs this blob instead:

    byte[6]  "SSHSIG"
    string   namespace
    string   reserved
    string   hash algorithm
    string   H(message)

which binds every signature to its namespace and hash algorithm. Signatures
are interchangeable with `ssh-keygen -Y sign` / `ssh-keygen -Y verify`.
"""

import hashlib
import logging
from typing import Union

from .envelope import MAGIC_PREAMBLE, SignatureEnvelope, decode
from .errors import SSHKeyError, ValidationError, VerificationFailed
from .keys import SSHKey
from .wire import pack_string


logger = logging.getLogger(__name__)

HASH_ALGORITHMS = ("sha256", "sha512")
DEFAULT_HASH_ALGORITHM = "sha512"


def hash_message(message: bytes, hash_algorithm: str) -> bytes:
    """Digest message with an allowed hash algorithm."""
    if hash_algorithm not in HASH_ALGORITHMS:
        raise ValidationError(
            f"hash algorithm {hash_algorithm!r} is not allowed "
            f"(allowed: {', '.join(HASH_ALGORITHMS)})"
        )
    return hashlib.new(hash_algorithm, message).digest()


def signed_data(
    namespace: str,
    hash_algorithm: str,
    digest: bytes,
    reserved: bytes = b"",
) -> bytes:
    """Build the exact byte sequence handed to the signature primitive."""
    return b"".join([
        MAGIC_PREAMBLE,
        pack_string(namespace),
        pack_string(reserved),
        pack_string(hash_algorithm),
        pack_string(digest),
    ])


def sign(
    key: SSHKey,
    message: bytes,
    namespace: str,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> SignatureEnvelope:
    """
    Sign a message.

    Args:
        key: Private key to sign with
        message: Raw bytes to sign
        namespace: Application-specific domain separator, must not be empty
        hash_algorithm: "sha256" or "sha512"

    Returns:
        SignatureEnvelope, ready for envelope.encode()
    """
    if not namespace:
        raise ValidationError("namespace must not be empty")
    if not key.can_sign:
        raise SSHKeyError(f"{key.algorithm} key {key.fingerprint()} cannot sign")

    digest = hash_message(message, hash_algorithm)
    blob = signed_data(namespace, hash_algorithm, digest)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Signing %d bytes with %s key %s (namespace=%s, hash=%s)",
            len(message), key.algorithm, key.fingerprint(), namespace, hash_algorithm,
        )

    return SignatureEnvelope(
        public_key=key.public_blob(),
        namespace=namespace,
        hash_algorithm=hash_algorithm,
        signature=key.sign(blob),
    )


def verify(
    public_key: SSHKey,
    message: bytes,
    signature: Union[bytes, str, SignatureEnvelope],
    namespace: str,
) -> SignatureEnvelope:
    """
    Verify a signature over a message.

    Which key to trust is the caller's decision: the key embedded in the
    envelope is not compared against public_key.

    Args:
        public_key: Key expected to have produced the signature
        message: Raw bytes that were signed
        signature: Armored signature, or an already decoded envelope
        namespace: Namespace the signature must have been made for

    Returns:
        The verified SignatureEnvelope

    Raises:
        FormatError: signature is malformed
        ValidationError: namespace mismatch or disallowed hash algorithm
        VerificationFailed: signature does not check out
    """
    if isinstance(signature, SignatureEnvelope):
        envelope = signature
    else:
        envelope = decode(signature)

    if envelope.namespace != namespace:
        raise ValidationError(
            f"namespace mismatch: signature is for {envelope.namespace!r}, "
            f"expected {namespace!r}"
        )
    if envelope.hash_algorithm not in HASH_ALGORITHMS:
        raise ValidationError(
            f"hash algorithm {envelope.hash_algorithm!r} is not allowed"
        )

    digest = hash_message(message, envelope.hash_algorithm)
    blob = signed_data(
        envelope.namespace, envelope.hash_algorithm, digest, envelope.reserved
    )

    if not public_key.verify(blob, envelope.signature):
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Signature check failed for key %s", public_key.fingerprint())
        raise VerificationFailed()

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Valid %s signature from %s", envelope.hash_algorithm, public_key.fingerprint()
        )
    return envelope
