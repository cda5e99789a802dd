import base64
import binascii
import os
import secrets
from typing import Annotated

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from pubcrypt.crypto.elgamal import BLOCK_MAX, Key, KeyPair
from pubcrypt.crypto.modexp import NUM_MAX
from pubcrypt.ecb import decrypt_bytes, encrypt_bytes
from pubcrypt.errors import FormatError, PrimeError


# ── Configuration ──────────────────────────────────
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("PUBCRYPT_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]


app = FastAPI(
    title="Pubcrypt API",
    version="0.1.0",
)

# ── Security: CORS ───────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)


# ── Security: HTTP headers ───────────────────────────────────
@app.middleware("http")
async def security_headers(request: Request, call_next):
    response: Response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
    # responses may carry private keys
    response.headers["Cache-Control"] = "no-store"
    return response


Num = Annotated[int, Field(ge=0, le=NUM_MAX)]


class KeyModel(BaseModel):
    prime: Num
    root: Num
    value: Num

    def to_key(self) -> Key:
        return Key(prime=self.prime, root=self.root, value=self.value)

    @classmethod
    def from_key(cls, key: Key) -> "KeyModel":
        return cls(prime=key.prime, root=key.root, value=key.value)


class KeyPairResponse(BaseModel):
    public: KeyModel
    private: KeyModel


class EncryptRequest(BaseModel):
    key: KeyModel
    plaintext_b64: str = Field(default="")


class EncryptResponse(BaseModel):
    pairs: list[tuple[Num, Num]]


class DecryptRequest(BaseModel):
    key: KeyModel
    pairs: list[tuple[Num, Num]] = Field(min_length=1)


class DecryptResponse(BaseModel):
    plaintext_b64: str


@app.get("/health")
async def health() -> dict:
    """Simple liveness probe."""
    return {"status": "ok"}


@app.post("/keys", status_code=status.HTTP_201_CREATED, response_model=KeyPairResponse)
def generate_keys():
    """Generate a fresh key pair. The private half is returned to the caller and not kept."""
    try:
        keys = KeyPair.generate(secrets.SystemRandom())
    except PrimeError as exc:  # pragma: no cover - the default range always holds a prime
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return KeyPairResponse(public=KeyModel.from_key(keys.public), private=KeyModel.from_key(keys.private))


@app.post("/encrypt", response_model=EncryptResponse)
def encrypt(payload: EncryptRequest):
    """Encrypt base64 plaintext block by block under a public key."""
    key = payload.key.to_key()
    if key.prime <= BLOCK_MAX:
        raise HTTPException(status_code=400, detail="key prime is too small for 32-bit blocks")
    try:
        data = base64.b64decode(payload.plaintext_b64, validate=True)
    except binascii.Error as exc:
        raise HTTPException(status_code=400, detail="plaintext_b64 is not valid base64") from exc

    return EncryptResponse(pairs=encrypt_bytes(data, key, secrets.SystemRandom()))


@app.post("/decrypt", response_model=DecryptResponse)
def decrypt(payload: DecryptRequest):
    """Decrypt ciphertext pairs with a private key."""
    try:
        data = decrypt_bytes(payload.pairs, payload.key.to_key())
    except FormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return DecryptResponse(plaintext_b64=base64.b64encode(data).decode())
