#!/usr/bin/env python3
"""
File signing and verification.

Reads whole files into memory, signs or verifies them with ssign.sshsig and
stores signatures next to the subject as <subject>.ssig by default.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from .envelope import SignatureEnvelope, encode
from .errors import SignatureError
from .keys import SSHKey
from .sshsig import DEFAULT_HASH_ALGORITHM, sign, verify


logger = logging.getLogger(__name__)

SIGNATURE_SUFFIX = ".ssig"


@dataclass
class SignatureResult:
    """Result of signing a file."""
    subject: str
    signature_path: str
    envelope: SignatureEnvelope
    fingerprint: str


@dataclass
class VerificationResult:
    """Result of a successful file verification."""
    subject: str
    signature_path: str
    envelope: SignatureEnvelope
    fingerprint: str


def default_signature_path(subject: str) -> str:
    return str(subject) + SIGNATURE_SUFFIX


def _read(path: str, what: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise SignatureError(f"could not open {what} {path}: {exc.strerror or exc}") from exc


def _write_atomic(path: str, data: bytes):
    """Write data to path via a temp file so no partial file is ever left."""
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=directory,
            prefix="." + os.path.basename(path) + ".",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_path = tmp.name
            tmp.write(data)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise SignatureError(
            f"could not write signature {path}: {exc.strerror or exc}"
        ) from exc


def sign_file(
    subject: str,
    key: SSHKey,
    namespace: str,
    output: Optional[str] = None,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> SignatureResult:
    """
    Sign a file and store the armored signature.

    Args:
        subject: File to sign
        key: Private key
        namespace: Signature namespace
        output: Signature path (default: <subject>.ssig)
        hash_algorithm: "sha256" or "sha512"

    Returns:
        SignatureResult describing the stored signature
    """
    subject = str(subject)
    signature_path = str(output) if output else default_signature_path(subject)

    message = _read(subject, "file")
    envelope = sign(key, message, namespace, hash_algorithm)
    _write_atomic(signature_path, encode(envelope))

    logger.debug("Wrote signature for %s to %s", subject, signature_path)
    return SignatureResult(
        subject=subject,
        signature_path=signature_path,
        envelope=envelope,
        fingerprint=key.fingerprint(),
    )


def verify_file(
    subject: str,
    public_key: SSHKey,
    namespace: str,
    signature_path: Optional[str] = None,
) -> VerificationResult:
    """
    Verify a file against its signature.

    Args:
        subject: Signed file
        public_key: Trusted public key
        namespace: Expected signature namespace
        signature_path: Signature file (default: <subject>.ssig)

    Returns:
        VerificationResult; any failure raises a SignatureError subclass
    """
    subject = str(subject)
    signature_path = (
        str(signature_path) if signature_path else default_signature_path(subject)
    )

    message = _read(subject, "file")
    signature = _read(signature_path, "signature")

    try:
        envelope = verify(public_key, message, signature, namespace)
    except SignatureError as exc:
        logger.debug("Verification of %s with %s failed: %s", subject, signature_path, exc)
        raise

    return VerificationResult(
        subject=subject,
        signature_path=signature_path,
        envelope=envelope,
        fingerprint=public_key.fingerprint(),
    )
