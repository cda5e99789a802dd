"""
Command-line front end.

    pubcrypt genkey --pub PUB --priv PRIV [--key-format binary|text]
    pubcrypt crypt (-e | -d) -i IN -o OUT -k KEY [--encoding binary|text] [--key-format binary|text]

Key locations may be local paths or s3://bucket/name URLs.
"""

import argparse
import os
import secrets
import sys
import tempfile

from botocore.exceptions import BotoCoreError, ClientError

from pubcrypt.codec import ENCODINGS
from pubcrypt.crypto.elgamal import BLOCK_MAX, KeyPair
from pubcrypt.ecb import decrypt_file, encrypt_file
from pubcrypt.errors import FormatError, PubcryptError
from pubcrypt.storage import KEY_FORMATS, read_key, write_key

FAILURES = (OSError, PubcryptError, ValueError, BotoCoreError, ClientError)


def die(msg: str, exc: Exception) -> None:
    print(f"{msg}: {exc}", file=sys.stderr)
    sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pubcrypt", description="Public key encryption and decryption application")
    sub = parser.add_subparsers(dest="command", required=True)

    genkey = sub.add_parser("genkey", help="Generate a public/private key pair")
    genkey.add_argument("--pub", required=True, help="Output public key to given location")
    genkey.add_argument("--priv", required=True, help="Output private key to given location")
    genkey.add_argument("--key-format", choices=KEY_FORMATS, default="binary")

    crypt = sub.add_parser("crypt", help="Encrypt or decrypt a file")
    mode = crypt.add_mutually_exclusive_group(required=True)
    mode.add_argument("-e", "--encrypt", action="store_true", help="Sets algorithm to encrypt")
    mode.add_argument("-d", "--decrypt", action="store_true", help="Sets algorithm to decrypt")
    crypt.add_argument("-i", "--in", dest="inpath", required=True, help="Read the algorithm input from the given file")
    crypt.add_argument("-o", "--out", dest="outpath", required=True, help="Write the algorithm output to the given file")
    crypt.add_argument("-k", "--key", dest="keypath", required=True, help="Read the key from the given location")
    crypt.add_argument("--encoding", choices=ENCODINGS, default="binary", help="Ciphertext encoding")
    crypt.add_argument("--key-format", choices=KEY_FORMATS, default="binary")

    return parser


def gen_keys(args) -> None:
    keys = KeyPair.generate(secrets.SystemRandom())
    write_key(args.pub, keys.public, args.key_format)
    write_key(args.priv, keys.private, args.key_format)
    print(f"Public key written to {args.pub}")
    print(f"Private key written to {args.priv}")


def run_crypt(args) -> None:
    try:
        key = read_key(args.keypath, args.key_format)
    except FAILURES as exc:
        die(f"Failed to read key from {args.keypath}", exc)

    # keys are trusted on read, but a public key must still fit the block width
    if args.encrypt and key.prime <= BLOCK_MAX:
        die("Encryption failed", FormatError("key prime is too small for 32-bit blocks"))

    try:
        reader = open(args.inpath, "rb")
    except OSError as exc:
        die(f"Failed to open input file {args.inpath}", exc)

    with reader:
        # output lands under its final name only once the whole stream is processed
        try:
            fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(os.path.abspath(args.outpath)), prefix=".pubcrypt-")
        except OSError as exc:
            die(f"Failed to open output file {args.outpath}", exc)

        try:
            with os.fdopen(fd, "wb") as writer:
                if args.encrypt:
                    encrypt_file(reader, writer, key, secrets.SystemRandom(), args.encoding)
                else:
                    decrypt_file(reader, writer, key, args.encoding)
            os.replace(tmp_path, args.outpath)
        except FAILURES as exc:
            os.unlink(tmp_path)
            die("Encryption failed" if args.encrypt else "Decryption failed", exc)


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    if args.command == "genkey":
        try:
            gen_keys(args)
        except FAILURES as exc:
            die("Failed to generate and write keys", exc)
    else:
        run_crypt(args)


if __name__ == "__main__":
    main()
