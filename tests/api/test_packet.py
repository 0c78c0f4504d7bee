"""Test miIO packet construction and parsing."""
from __future__ import annotations

import hashlib
import json
import struct

import pytest

from custom_components.xiaomi_purifier.api.const import HEADER_LENGTH, PACKET_MAGIC
from custom_components.xiaomi_purifier.api.exceptions import MiioPacketError
from custom_components.xiaomi_purifier.api.packet import (
    HELLO_PACKET,
    MiioCipher,
    build_packet,
    decode_message,
    decode_packet,
    encode_message,
    parse_header,
    parse_token,
)

TOKEN_HEX = "00112233445566778899aabbccddeeff"
TOKEN = bytes.fromhex(TOKEN_HEX)


@pytest.fixture
def cipher() -> MiioCipher:
    return MiioCipher(TOKEN)


# ==============================================================================
# Token and Cipher Tests
# ==============================================================================


class TestToken:
    """Test token parsing."""

    def test_parse_valid_token(self):
        """Test a 32 character hex token."""
        assert parse_token(TOKEN_HEX) == TOKEN

    def test_parse_token_strips_whitespace(self):
        """Test surrounding whitespace is ignored."""
        assert parse_token(f"  {TOKEN_HEX}\n") == TOKEN

    @pytest.mark.parametrize("token", ["", "abcd", TOKEN_HEX + "00", "zz" * 16])
    def test_parse_invalid_token(self, token):
        """Test short, long and non-hex tokens are rejected."""
        with pytest.raises(ValueError):
            parse_token(token)


class TestMiioCipher:
    """Test key derivation and AES."""

    def test_key_and_iv_derivation(self, cipher):
        """Test key = md5(token) and iv = md5(key + token)."""
        key = hashlib.md5(TOKEN).digest()
        assert cipher.key == key
        assert cipher.iv == hashlib.md5(key + TOKEN).digest()

    def test_encrypt_pads_to_block(self, cipher):
        """Test ciphertext is a whole number of AES blocks."""
        assert len(cipher.encrypt(b"x")) == 16
        assert len(cipher.encrypt(b"x" * 16)) == 32

    def test_decrypt_inverts_encrypt(self, cipher):
        """Test decrypting returns the plaintext."""
        payload = b'{"id":1,"method":"get_prop","params":["power"]}\x00'
        assert cipher.decrypt(cipher.encrypt(payload)) == payload


# ==============================================================================
# Header Tests
# ==============================================================================


class TestHeader:
    """Test header parsing."""

    def test_hello_packet(self):
        """Test the hello packet layout."""
        assert len(HELLO_PACKET) == HEADER_LENGTH
        assert HELLO_PACKET[:4] == bytes.fromhex("21310020")
        assert HELLO_PACKET[4:] == b"\xff" * 28

        header = parse_header(HELLO_PACKET)
        assert header.is_hello

    def test_parse_hello_reply(self):
        """Test device id and stamp are read from a hello reply."""
        reply = struct.pack(
            ">HHIII16s", PACKET_MAGIC, HEADER_LENGTH, 0, 0x0A1B2C3D, 1234, TOKEN
        )

        header = parse_header(reply)

        assert header.device_id == 0x0A1B2C3D
        assert header.stamp == 1234
        assert header.is_hello

    def test_short_packet(self):
        """Test packets under 32 bytes are rejected."""
        with pytest.raises(MiioPacketError):
            parse_header(b"\x21\x31\x00\x10")

    def test_bad_magic(self):
        """Test the magic number is checked."""
        with pytest.raises(MiioPacketError):
            parse_header(b"\x00\x00\x00\x20" + b"\x00" * 28)

    def test_length_mismatch(self):
        """Test the length field must match the datagram."""
        with pytest.raises(MiioPacketError):
            parse_header(HELLO_PACKET + b"\x00")


# ==============================================================================
# Packet Tests
# ==============================================================================


class TestPackets:
    """Test building and decoding encrypted packets."""

    def test_build_packet_header(self, cipher):
        """Test header fields of a request packet."""
        packet = build_packet(cipher, 0x1234, 99, b"{}\x00")

        header = parse_header(packet)
        assert header.length == len(packet)
        assert header.unknown == 0
        assert header.device_id == 0x1234
        assert header.stamp == 99
        assert not header.is_hello

    def test_checksum(self, cipher):
        """Test checksum = md5(header prefix + token + body)."""
        packet = build_packet(cipher, 1, 2, b"{}\x00")

        expected = hashlib.md5(packet[:16] + TOKEN + packet[32:]).digest()
        assert packet[16:32] == expected

    def test_decode_built_packet(self, cipher):
        """Test a built packet decodes to its payload."""
        payload = encode_message(7, "get_prop", ["power", "aqi"])
        packet = build_packet(cipher, 1, 2, payload)

        header, decoded = decode_packet(cipher, packet)

        assert header.device_id == 1
        assert decoded == payload

    def test_decode_hello_has_no_payload(self, cipher):
        """Test hello replies decode to an empty payload."""
        _, payload = decode_packet(cipher, HELLO_PACKET)

        assert payload == b""

    def test_tampered_packet(self, cipher):
        """Test a modified body fails the checksum."""
        packet = bytearray(build_packet(cipher, 1, 2, b'{"id":1}\x00'))
        packet[-1] ^= 0xFF

        with pytest.raises(MiioPacketError, match="Checksum"):
            decode_packet(cipher, bytes(packet))

    def test_wrong_token(self, cipher):
        """Test a packet for another token fails the checksum."""
        other = MiioCipher(b"\x01" * 16)
        packet = build_packet(other, 1, 2, b'{"id":1}\x00')

        with pytest.raises(MiioPacketError):
            decode_packet(cipher, packet)


# ==============================================================================
# Message Tests
# ==============================================================================


class TestMessages:
    """Test JSON message encoding."""

    def test_encode_message(self):
        """Test compact JSON with a trailing NUL."""
        encoded = encode_message(3, "set_power", ["on"])

        assert encoded.endswith(b"\x00")
        assert json.loads(encoded[:-1]) == {
            "id": 3,
            "method": "set_power",
            "params": ["on"],
        }
        assert b" " not in encoded

    def test_decode_message_with_nul(self):
        """Test a NUL terminated reply."""
        assert decode_message(b'{"id":3,"result":["ok"]}\x00') == {
            "id": 3,
            "result": ["ok"],
        }

    def test_decode_message_without_nul(self):
        """Test the terminator is optional."""
        assert decode_message(b'{"id":3,"result":[]}')["result"] == []

    @pytest.mark.parametrize("payload", [b"not json", b"[1, 2]", b"\xff\xfe"])
    def test_decode_invalid_message(self, payload):
        """Test non-object payloads are rejected."""
        with pytest.raises(MiioPacketError):
            decode_message(payload)
