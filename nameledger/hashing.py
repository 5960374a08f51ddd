"""
nameledger.hashing — deterministic index keys for names and sub-records.

Keys are SHA3-256 digests with a one-byte-tag domain separation so a name key
can never collide with a sub-record key. Each component is prefixed with its
UTF-8 byte length (4 bytes, big-endian), so no choice of characters inside a
name or TLD can shift bytes from one component into the other:

    name_key(name, tld) = sha3_256(b"N" || len(name) || utf8(name) || len(tld) || utf8(tld))
    sub_key(full_name)  = sha3_256(b"S" || len(full_name) || utf8(full_name))
"""

from __future__ import annotations

import hashlib

_NAME_TAG = b"N"
_SUB_TAG = b"S"


def _framed(text: str) -> bytes:
    raw = text.encode("utf-8")
    return len(raw).to_bytes(4, "big") + raw


def name_key(name: str, tld: str) -> bytes:
    h = hashlib.sha3_256()
    h.update(_NAME_TAG)
    h.update(_framed(name))
    h.update(_framed(tld))
    return h.digest()


def sub_key(full_name: str) -> bytes:
    return hashlib.sha3_256(_SUB_TAG + _framed(full_name)).digest()


def compose_full_name(sub_name: str, name: str, tld: str) -> str:
    """`sub_name + "." + name + "." + tld`."""
    return f"{sub_name}.{name}.{tld}"


__all__ = ["compose_full_name", "name_key", "sub_key"]
