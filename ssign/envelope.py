#!/usr/bin/env python3
"""
SSHSIG signature envelope codec.

Converts a SignatureEnvelope to and from its PEM-armored form:

    -----BEGIN SSH SIGNATURE-----
    U1NIU0lHAAAAAQAAADMAAAALc3NoLWVkMjU1MTkAAAAg...
    -----END SSH SIGNATURE-----

The armored payload is, in order: the 6 byte "SSHSIG" preamble, uint32
version, string public key, string namespace, string reserved, string hash
algorithm, string signature. No cryptographic checks happen here.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Union

from .errors import FormatError
from .wire import WireReader, pack_string, pack_uint32


MAGIC_PREAMBLE = b"SSHSIG"
SIG_VERSION = 1
PEM_LABEL = "SSH SIGNATURE"
PEM_LINE_LENGTH = 70

_PEM_RE = re.compile(
    rb"-----BEGIN ([^-\r\n]+)-----(.*?)-----END ([^-\r\n]+)-----",
    re.DOTALL,
)


def _text(raw: bytes, field: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"signature: {field} is not valid UTF-8") from exc


@dataclass(frozen=True)
class SignatureEnvelope:
    """A parsed SSHSIG signature. Immutable once built."""
    public_key: bytes
    namespace: str
    hash_algorithm: str
    signature: bytes
    reserved: bytes = b""
    version: int = SIG_VERSION

    def to_bytes(self) -> bytes:
        """Serialize to the unarmored binary blob."""
        return b"".join([
            MAGIC_PREAMBLE,
            pack_uint32(self.version),
            pack_string(self.public_key),
            pack_string(self.namespace),
            pack_string(self.reserved),
            pack_string(self.hash_algorithm),
            pack_string(self.signature),
        ])

    @classmethod
    def from_bytes(cls, blob: bytes) -> "SignatureEnvelope":
        """Parse the unarmored binary blob."""
        reader = WireReader(blob, "signature")
        magic = reader.read_bytes(len(MAGIC_PREAMBLE), "magic preamble")
        if magic != MAGIC_PREAMBLE:
            raise FormatError(f"signature: bad magic preamble {magic!r}")

        version = reader.read_uint32("version")
        if version != SIG_VERSION:
            raise FormatError(f"signature: unsupported version {version}")

        public_key = reader.read_string("public key")
        namespace = _text(reader.read_string("namespace"), "namespace")
        reserved = reader.read_string("reserved")
        hash_algorithm = _text(
            reader.read_string("hash algorithm"), "hash algorithm"
        )
        signature = reader.read_string("signature")
        reader.finish()

        return cls(
            public_key=public_key,
            namespace=namespace,
            hash_algorithm=hash_algorithm,
            signature=signature,
            reserved=reserved,
            version=version,
        )

    @property
    def key_type(self) -> str:
        """Key type named inside the public key blob, e.g. ssh-ed25519."""
        reader = WireReader(self.public_key, "public key")
        return _text(reader.read_string("key type"), "key type")

    @property
    def signature_algorithm(self) -> str:
        """Algorithm named inside the signature blob, e.g. rsa-sha2-512."""
        reader = WireReader(self.signature, "signature blob")
        return _text(reader.read_string("algorithm"), "signature algorithm")


def armor(blob: bytes) -> bytes:
    """Wrap a binary signature blob in SSH SIGNATURE PEM armor."""
    body = base64.b64encode(blob)
    lines = [
        body[i:i + PEM_LINE_LENGTH]
        for i in range(0, len(body), PEM_LINE_LENGTH)
    ]
    return b"\n".join(
        [f"-----BEGIN {PEM_LABEL}-----".encode("ascii")]
        + lines
        + [f"-----END {PEM_LABEL}-----".encode("ascii")]
    ) + b"\n"


def dearmor(data: Union[bytes, str]) -> bytes:
    """Extract the binary blob from the first PEM block in data."""
    if isinstance(data, str):
        try:
            data = data.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise FormatError("signature: text is not valid UTF-8") from exc

    match = _PEM_RE.search(data)
    if not match:
        raise FormatError("signature: no PEM block found")

    begin, body, end = match.groups()
    if begin != end:
        raise FormatError(
            f"signature: mismatched PEM labels {begin!r} / {end!r}"
        )
    if begin.decode("ascii", "replace") != PEM_LABEL:
        raise FormatError(
            f"signature: expected PEM type {PEM_LABEL!r}, "
            f"got {begin.decode('ascii', 'replace')!r}"
        )

    try:
        return base64.b64decode(b"".join(body.split()), validate=True)
    except binascii.Error as exc:
        raise FormatError(f"signature: invalid base64 in PEM body: {exc}") from exc


def encode(envelope: SignatureEnvelope) -> bytes:
    """Serialize and armor an envelope."""
    return armor(envelope.to_bytes())


def decode(data: Union[bytes, str]) -> SignatureEnvelope:
    """Strip armor and parse an envelope. Raises FormatError."""
    return SignatureEnvelope.from_bytes(dearmor(data))
