import base64
import re

import pytest

from mandelcli.kitty import APC_END, APC_START, CHUNK_SIZE, CLEAR_IMAGES, chunk_payload, encode_kitty

SEQUENCE = re.compile(r"\x1b_G([^;]*);([^\x1b]*)\x1b\\")


def parse(stream):
    """Split a stream into (control fields dict, payload) pairs."""
    sequences = SEQUENCE.findall(stream)
    assert "".join(f"\x1b_G{c};{p}\x1b\\" for c, p in sequences) == stream
    return [(dict(field.split("=") for field in control.split(",")), payload)
            for control, payload in sequences]


def test_small_payload_is_one_sequence():
    stream = encode_kitty(b"tiny png", 20, 10)
    assert stream.startswith(APC_START + "a=T,f=100,m=0,c=20,r=10;")
    assert stream.endswith(APC_END)
    [(control, payload)] = parse(stream)
    assert control == {"a": "T", "f": "100", "m": "0", "c": "20", "r": "10"}
    assert base64.b64decode(payload) == b"tiny png"


def test_payload_filling_exactly_one_chunk():
    data = bytes(range(256)) * 48  # 12288 bytes -> 16384 base64 characters
    sequences = parse(encode_kitty(data, 4, 2))
    assert len(sequences) == 1
    control, payload = sequences[0]
    assert len(payload) == CHUNK_SIZE
    assert control["m"] == "0"
    assert control["c"] == "4" and control["r"] == "2"


def test_one_byte_more_needs_a_second_chunk():
    data = bytes(12289)
    sequences = parse(encode_kitty(data, 4, 2))
    assert len(sequences) == 2
    assert sequences[0][0]["m"] == "1"
    assert sequences[1][0] == {"a": "T", "f": "100", "m": "0"}


@pytest.mark.parametrize("size, chunks", [(40000, 4), (100000, 9)])
def test_multi_chunk_framing(size, chunks):
    data = bytes(i % 251 for i in range(size))
    sequences = parse(encode_kitty(data, 80, 24))
    assert len(sequences) == chunks

    first, *middle, last = sequences
    assert first[0] == {"a": "T", "f": "100", "m": "1", "c": "80", "r": "24"}
    for control, _ in middle:
        assert control == {"a": "T", "f": "100", "m": "1"}
    assert last[0] == {"a": "T", "f": "100", "m": "0"}

    assert all(len(payload) <= CHUNK_SIZE for _, payload in sequences)
    assert base64.b64decode("".join(payload for _, payload in sequences)) == data


def test_empty_payload_still_sends_one_sequence():
    assert encode_kitty(b"", 1, 1) == "\x1b_Ga=T,f=100,m=0,c=1,r=1;\x1b\\"


def test_chunk_payload_never_returns_empty_continuations():
    assert chunk_payload(b"", 4) == [""]
    assert chunk_payload(b"abc", 4) == ["YWJj"]
    assert chunk_payload(b"abcd", 4) == ["YWJj", "ZA=="]


def test_clear_command():
    assert CLEAR_IMAGES == "\x1b_Ga=d,d=A,q=2;\x1b\\"
