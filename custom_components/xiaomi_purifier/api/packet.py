"""miIO packet construction and parsing.

Every datagram starts with a 32-byte header followed by an AES encrypted
JSON payload.

Header format (big endian):
- Bytes 0-1: Magic 0x2131
- Bytes 2-3: Total packet length including header
- Bytes 4-7: Unknown, 0x00000000 (0xFFFFFFFF in hello packets)
- Bytes 8-11: Device ID
- Bytes 12-15: Stamp (seconds since device boot, echoed back incremented)
- Bytes 16-31: MD5 checksum of the packet with the token in this field

Hello packet:
- 32 bytes, header only, every field after the length set to 0xFF.
  The reply carries the device ID and current stamp.

Encryption:
- Key: MD5(token)
- IV: MD5(key + token)
- AES-128-CBC with PKCS#7 padding
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import json
import struct
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .const import HEADER_LENGTH, HELLO_FILL, PACKET_MAGIC
from .exceptions import MiioPacketError

HEADER_FORMAT = ">HHIII16s"

HELLO_PACKET = struct.pack(
    HEADER_FORMAT,
    PACKET_MAGIC,
    HEADER_LENGTH,
    HELLO_FILL,
    HELLO_FILL,
    HELLO_FILL,
    b"\xff" * 16,
)


def md5(data: bytes) -> bytes:
    """Return the MD5 digest of data."""
    return hashlib.md5(data).digest()  # noqa: S324


def parse_token(token: str) -> bytes:
    """Convert a 32 character hex token to bytes.

    Raises:
        ValueError: If the token is not 16 bytes of hex.
    """
    raw = bytes.fromhex(token.strip())
    if len(raw) != 16:
        raise ValueError(f"Token must be 32 hex characters, got {len(token)}")
    return raw


@dataclass(frozen=True)
class PacketHeader:
    """Decoded miIO header."""

    length: int
    unknown: int
    device_id: int
    stamp: int
    checksum: bytes

    @property
    def is_hello(self) -> bool:
        """True for a header-only packet (hello or hello reply)."""
        return self.length == HEADER_LENGTH


class MiioCipher:
    """AES-128-CBC cipher keyed from a device token."""

    def __init__(self, token: bytes) -> None:
        """Derive key and IV from the token."""
        self.token = token
        self.key = md5(token)
        self.iv = md5(self.key + token)

    def encrypt(self, plaintext: bytes) -> bytes:
        """Pad and encrypt plaintext."""
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self.key), modes.CBC(self.iv)).encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt and unpad ciphertext.

        Raises:
            MiioPacketError: If the padding is invalid (usually a wrong token).
        """
        decryptor = Cipher(algorithms.AES(self.key), modes.CBC(self.iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as err:
            raise MiioPacketError("Invalid padding, check the device token") from err


def parse_header(data: bytes) -> PacketHeader:
    """Decode the header of a datagram.

    Raises:
        MiioPacketError: If the packet is short or has the wrong magic/length.
    """
    if len(data) < HEADER_LENGTH:
        raise MiioPacketError(f"Packet too short: {len(data)} bytes")

    magic, length, unknown, device_id, stamp, checksum = struct.unpack(
        HEADER_FORMAT, data[:HEADER_LENGTH]
    )
    if magic != PACKET_MAGIC:
        raise MiioPacketError(f"Bad magic 0x{magic:04x}")
    if length != len(data):
        raise MiioPacketError(f"Length field {length} does not match {len(data)} bytes")

    return PacketHeader(
        length=length,
        unknown=unknown,
        device_id=device_id,
        stamp=stamp,
        checksum=checksum,
    )


def _checksum(cipher: MiioCipher, header_prefix: bytes, body: bytes) -> bytes:
    return md5(header_prefix + cipher.token + body)


def build_packet(cipher: MiioCipher, device_id: int, stamp: int, payload: bytes) -> bytes:
    """Build an encrypted request packet.

    Args:
        cipher: Cipher for the target device.
        device_id: Device ID learned from the hello reply.
        stamp: Device stamp to send.
        payload: Plaintext payload.

    Returns:
        Complete datagram.
    """
    body = cipher.encrypt(payload)
    prefix = struct.pack(
        ">HHIII", PACKET_MAGIC, HEADER_LENGTH + len(body), 0, device_id, stamp
    )
    return prefix + _checksum(cipher, prefix, body) + body


def decode_packet(cipher: MiioCipher, data: bytes) -> tuple[PacketHeader, bytes]:
    """Verify and decrypt a response packet.

    Returns:
        The header and the decrypted payload (empty for hello replies).

    Raises:
        MiioPacketError: On malformed packets or checksum mismatch.
    """
    header = parse_header(data)
    if header.is_hello:
        return header, b""

    body = data[HEADER_LENGTH:]
    if _checksum(cipher, data[:16], body) != header.checksum:
        raise MiioPacketError("Checksum mismatch")

    return header, cipher.decrypt(body)


def encode_message(request_id: int, method: str, params: list[Any]) -> bytes:
    """Encode a JSON-RPC style request, NUL terminated."""
    message = {"id": request_id, "method": method, "params": params}
    return json.dumps(message, separators=(",", ":")).encode("utf-8") + b"\x00"


def decode_message(payload: bytes) -> dict[str, Any]:
    """Decode a JSON response payload.

    Raises:
        MiioPacketError: If the payload is not a JSON object.
    """
    try:
        message = json.loads(payload.rstrip(b"\x00").decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as err:
        raise MiioPacketError(f"Invalid JSON payload: {err}") from err

    if not isinstance(message, dict):
        raise MiioPacketError("Payload is not a JSON object")
    return message
