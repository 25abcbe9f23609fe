"""ssign library."""

__version__ = "0.1.0"

from .errors import (
    SignatureError,
    FormatError,
    ValidationError,
    VerificationFailed,
    SSHKeyError,
    PassphraseRequired,
)

from .envelope import (
    SignatureEnvelope,
    encode,
    decode,
    armor,
    dearmor,
)

from .keys import (
    SSHKey,
    Ed25519Key,
    RSAKey,
    ECDSAKey,
    from_cryptography,
    try_load_private_key,
    load_private_key,
    read_private_key,
    load_public_key,
    public_key_from_blob,
    read_public_key,
)

from .sshsig import (
    HASH_ALGORITHMS,
    DEFAULT_HASH_ALGORITHM,
    hash_message,
    signed_data,
    sign,
    verify,
)

from .signer import (
    SignatureResult,
    VerificationResult,
    default_signature_path,
    sign_file,
    verify_file,
)

__all__ = [
    "SignatureError",
    "FormatError",
    "ValidationError",
    "VerificationFailed",
    "SSHKeyError",
    "PassphraseRequired",
    "SignatureEnvelope",
    "encode",
    "decode",
    "armor",
    "dearmor",
    "SSHKey",
    "Ed25519Key",
    "RSAKey",
    "ECDSAKey",
    "from_cryptography",
    "try_load_private_key",
    "load_private_key",
    "read_private_key",
    "load_public_key",
    "public_key_from_blob",
    "read_public_key",
    "HASH_ALGORITHMS",
    "DEFAULT_HASH_ALGORITHM",
    "hash_message",
    "signed_data",
    "sign",
    "verify",
    "SignatureResult",
    "VerificationResult",
    "default_signature_path",
    "sign_file",
    "verify_file",
]
