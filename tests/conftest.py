"""
Shared fixtures: keys generated in-process with cryptography.
"""

import os
import shutil
import subprocess

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from ssign.keys import from_cryptography


def openssh_signing_available() -> bool:
    """True if ssh-keygen supports -Y (OpenSSH 8.0+)."""
    if not (shutil.which("ssh-keygen") and shutil.which("ssh")):
        return False
    result = subprocess.run(["ssh", "-V"], capture_output=True, text=True)
    version_str = result.stderr.strip()
    if "OpenSSH_" not in version_str:
        return False
    version_part = version_str.split("OpenSSH_")[1].split(",")[0]
    return int(version_part.split(".")[0].split("p")[0]) >= 8


def write_private_key(path, private_key, passphrase=None, fmt=None):
    """Serialize a cryptography private key to path (mode 0600)."""
    encryption = (
        serialization.BestAvailableEncryption(passphrase)
        if passphrase else serialization.NoEncryption()
    )
    data = private_key.private_bytes(
        serialization.Encoding.PEM,
        fmt or serialization.PrivateFormat.OpenSSH,
        encryption,
    )
    with open(path, "wb") as f:
        f.write(data)
    os.chmod(path, 0o600)
    return str(path)


def write_public_key(path, private_key, comment="test@example.com"):
    line = private_key.public_key().public_bytes(
        serialization.Encoding.OpenSSH,
        serialization.PublicFormat.OpenSSH,
    )
    with open(path, "wb") as f:
        f.write(line + b" " + comment.encode() + b"\n")
    return str(path)


@pytest.fixture
def ed25519_private():
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture
def ed25519_key(ed25519_private):
    return from_cryptography(ed25519_private)


@pytest.fixture(scope="session")
def rsa_private():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def rsa_key(rsa_private):
    return from_cryptography(rsa_private)


@pytest.fixture(params=["ed25519", "rsa", "p256", "p384", "p521"])
def any_key(request, rsa_private):
    """One signing key of every supported algorithm family."""
    if request.param == "ed25519":
        private = ed25519.Ed25519PrivateKey.generate()
    elif request.param == "rsa":
        private = rsa_private
    else:
        curve = {
            "p256": ec.SECP256R1,
            "p384": ec.SECP384R1,
            "p521": ec.SECP521R1,
        }[request.param]
        private = ec.generate_private_key(curve())
    return from_cryptography(private)
