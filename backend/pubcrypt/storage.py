import os
from typing import Tuple

import boto3

from pubcrypt.crypto.elgamal import Key
from pubcrypt.errors import FormatError

KEY_FORMATS = ("binary", "text")
S3_SCHEME = "s3://"


def get_s3_client():
    endpoint = os.getenv("PUBCRYPT_S3_ENDPOINT", "http://minio:9000")
    access_key = os.getenv("PUBCRYPT_S3_ACCESS_KEY", "minioadmin")
    secret_key = os.getenv("PUBCRYPT_S3_SECRET_KEY", "minioadmin")
    return boto3.client(
        "s3",
        endpoint_url=endpoint,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
    )


def ensure_bucket(client, bucket: str) -> None:
    existing = client.list_buckets().get("Buckets", [])
    if not any(b["Name"] == bucket for b in existing):
        client.create_bucket(Bucket=bucket)


def split_s3_url(location: str) -> Tuple[str, str]:
    bucket, _, name = location[len(S3_SCHEME):].partition("/")
    if not bucket or not name:
        raise ValueError(f"expected s3://bucket/name, got {location!r}")
    return bucket, name


def key_to_bytes(key: Key, fmt: str = "binary") -> bytes:
    if fmt not in KEY_FORMATS:
        raise ValueError(f"unknown key format {fmt!r}")
    if fmt == "binary":
        return key.serialize()
    return key.to_text().encode("ascii")


def key_from_bytes(data: bytes, fmt: str = "binary") -> Key:
    """Rebuild a key from its stored form. Nothing beyond the layout is validated."""
    if fmt not in KEY_FORMATS:
        raise ValueError(f"unknown key format {fmt!r}")
    if fmt == "binary":
        return Key.deserialize(data)
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as exc:
        raise FormatError("text key must be ASCII") from exc
    return Key.from_text(text)


def write_key(location: str, key: Key, fmt: str = "binary", client=None) -> None:
    data = key_to_bytes(key, fmt)
    if not location.startswith(S3_SCHEME):
        with open(location, "wb") as f:
            f.write(data)
        return

    bucket, name = split_s3_url(location)
    if client is None:
        client = get_s3_client()
    ensure_bucket(client, bucket)
    client.put_object(Bucket=bucket, Key=name, Body=data, ContentType="application/octet-stream")


def read_key(location: str, fmt: str = "binary", client=None) -> Key:
    if not location.startswith(S3_SCHEME):
        with open(location, "rb") as f:
            return key_from_bytes(f.read(), fmt)

    bucket, name = split_s3_url(location)
    if client is None:
        client = get_s3_client()
    resp = client.get_object(Bucket=bucket, Key=name)
    return key_from_bytes(resp["Body"].read(), fmt)
