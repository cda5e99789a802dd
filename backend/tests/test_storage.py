import io

import pytest

from pubcrypt.crypto.elgamal import Key
from pubcrypt.errors import FormatError
from pubcrypt.storage import key_from_bytes, key_to_bytes, read_key, split_s3_url, write_key

KEY = Key(prime=4294967311, root=3, value=1234567)


class FakeS3:
    """In-memory stand-in for the handful of S3 calls the key store makes."""

    def __init__(self):
        self.buckets = {}

    def list_buckets(self):
        return {"Buckets": [{"Name": name} for name in self.buckets]}

    def create_bucket(self, Bucket):
        self.buckets[Bucket] = {}

    def put_object(self, Bucket, Key, Body, ContentType):
        self.buckets[Bucket][Key] = Body

    def get_object(self, Bucket, Key):
        return {"Body": io.BytesIO(self.buckets[Bucket][Key])}


@pytest.mark.parametrize("fmt", ["binary", "text"])
def test_file_round_trip(fmt, tmp_path):
    path = str(tmp_path / f"key.{fmt}")
    write_key(path, KEY, fmt)
    assert read_key(path, fmt) == KEY


def test_text_key_file_is_readable(tmp_path):
    path = tmp_path / "key.txt"
    write_key(str(path), KEY, "text")
    assert path.read_text() == "4294967311 3 1234567\n"


def test_binary_key_file_size(tmp_path):
    path = tmp_path / "key.bin"
    write_key(str(path), KEY)
    assert path.stat().st_size == Key.KEY_BYTES


def test_missing_file_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        read_key(str(tmp_path / "absent"))


def test_s3_round_trip_creates_bucket():
    client = FakeS3()
    write_key("s3://keys/alice.pub", KEY, "binary", client=client)
    assert "keys" in client.buckets
    assert client.buckets["keys"]["alice.pub"] == KEY.serialize()
    assert read_key("s3://keys/alice.pub", "binary", client=client) == KEY


@pytest.mark.parametrize("url", ["s3://", "s3://bucket", "s3://bucket/", "s3:///name"])
def test_split_s3_url_rejects_incomplete(url):
    with pytest.raises(ValueError):
        split_s3_url(url)


def test_key_format_validation():
    with pytest.raises(ValueError):
        key_to_bytes(KEY, "pem")
    with pytest.raises(ValueError):
        key_from_bytes(b"", "pem")
    with pytest.raises(FormatError):
        key_from_bytes(b"\xff\xfe", "text")
    with pytest.raises(FormatError):
        key_from_bytes(b"short", "binary")
