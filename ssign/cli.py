#!/usr/bin/env python3
"""
CLI for ssign: sign and verify files using SSH signatures.
"""

import argparse
import getpass
import logging
import os
import sys

from . import __version__
from .envelope import decode
from .errors import FormatError, SignatureError
from .keys import public_key_from_blob, read_private_key, read_public_key
from .signer import sign_file, verify_file
from .sshsig import DEFAULT_HASH_ALGORITHM, HASH_ALGORITHMS


NAMESPACE = "ssign@becker.software"
DEFAULT_KEY = os.path.expanduser("~/.ssh/id_ed25519")
DEFAULT_PUBLIC_KEY = os.path.expanduser("~/.ssh/id_ed25519.pub")


def ask_passphrase(path: str) -> str:
    """Prompt for the passphrase of an encrypted key."""
    return getpass.getpass(f"Enter the passphrase to unlock {path!r}: ")


def cmd_sign(args):
    """Sign a file."""
    try:
        key = read_private_key(args.key, ask=ask_passphrase)
    except SignatureError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        result = sign_file(
            args.file,
            key,
            args.namespace,
            output=args.signature,
            hash_algorithm=args.hash,
        )
    except SignatureError as e:
        print(f"Error: could not sign {args.file}: {e}", file=sys.stderr)
        return 1

    print(f"✓ Signed {result.subject} with {args.key}")
    print(f"Signature stored at {result.signature_path}")
    print(f"Key: {result.fingerprint}")
    return 0


def cmd_verify(args):
    """Verify a signature."""
    try:
        public_key = read_public_key(args.public_key)
    except SignatureError as e:
        print(f"Error: could not parse public key: {e}", file=sys.stderr)
        return 1

    try:
        result = verify_file(
            args.file,
            public_key,
            args.namespace,
            signature_path=args.signature,
        )
    except SignatureError as e:
        print(f"✗ Could not verify {args.file}: {e}", file=sys.stderr)
        return 1

    print(f"✓ Valid signature for {result.subject} at {result.signature_path}")
    print(f"Verified signed for key {args.public_key} ({result.fingerprint})")
    return 0


def cmd_inspect(args):
    """Show the contents of a signature without verifying it."""
    try:
        with open(args.signature, "rb") as f:
            envelope = decode(f.read())
    except OSError as e:
        print(f"Error: could not open signature {args.signature}: {e.strerror or e}", file=sys.stderr)
        return 1
    except FormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Version: {envelope.version}")
    print(f"Namespace: {envelope.namespace}")
    print(f"Hash: {envelope.hash_algorithm}")

    try:
        print(f"Key type: {envelope.key_type}")
        print(f"Signature algorithm: {envelope.signature_algorithm}")
        key = public_key_from_blob(envelope.public_key)
    except SignatureError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Key: {key.fingerprint()}")
    if args.verbose:
        print(f"Public key: {key.authorized_key()}")
    print("Status: NOT VERIFIED")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ssign",
        description="sign and verify files using SSH signatures",
        epilog=(
            "examples:\n"
            "  ssign sign --key ./id_ed25519 file file.sig\n"
            "  ssign verify --public-key ./id_ed25519.pub file file.sig"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # ssign sign
    sign_parser = subparsers.add_parser('sign', aliases=['s'], help='Sign a file')
    sign_parser.add_argument('file', help='File to sign')
    sign_parser.add_argument('signature', nargs='?', help='Signature output path (default: <file>.ssig)')
    sign_parser.add_argument('--key', default=DEFAULT_KEY, help=f'SSH key to be used (default: {DEFAULT_KEY})')
    sign_parser.add_argument('--namespace', '-n', default=NAMESPACE, help=f'Signature namespace (default: {NAMESPACE})')
    sign_parser.add_argument('--hash', choices=HASH_ALGORITHMS, default=DEFAULT_HASH_ALGORITHM, help='Hash algorithm')
    sign_parser.set_defaults(func=cmd_sign)

    # ssign verify
    verify_parser = subparsers.add_parser('verify', aliases=['v'], help='Verify a signature')
    verify_parser.add_argument('file', help='Signed file')
    verify_parser.add_argument('signature', nargs='?', help='Signature path (default: <file>.ssig)')
    verify_parser.add_argument('--public-key', default=DEFAULT_PUBLIC_KEY, help=f'SSH public key to be used (default: {DEFAULT_PUBLIC_KEY})')
    verify_parser.add_argument('--namespace', '-n', default=NAMESPACE, help=f'Expected signature namespace (default: {NAMESPACE})')
    verify_parser.set_defaults(func=cmd_verify)

    # ssign inspect
    inspect_parser = subparsers.add_parser('inspect', aliases=['i'], help='Show signature contents without verifying')
    inspect_parser.add_argument('signature', help='Signature file')
    inspect_parser.set_defaults(func=cmd_inspect)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
