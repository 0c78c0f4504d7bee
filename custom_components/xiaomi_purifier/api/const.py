from __future__ import annotations

MIIO_PORT = 54321

PACKET_MAGIC = 0x2131
HEADER_LENGTH = 32

# Hello packets carry 0xFF in every field after the length
HELLO_FILL = 0xFFFFFFFF

METHOD_GET_PROP = "get_prop"
RESULT_OK = "ok"

# Request ids wrap back to 1 after this value
MAX_REQUEST_ID = 9999

# Handshake again if the last one is older than this many seconds
HANDSHAKE_MAX_AGE = 300

REQUEST_TIMEOUT = 5
HANDSHAKE_TIMEOUT = 5
