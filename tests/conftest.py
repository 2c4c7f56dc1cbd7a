from __future__ import annotations

import io

import numpy as np
import pytest

SAMPLE = b"AAAABBBBCC"


class SpyStream(io.BytesIO):
    """BytesIO that records every seek and read issued against it."""

    def __init__(self, data: bytes):
        super().__init__(data)
        self.calls: list[tuple] = []

    def seek(self, pos, whence=io.SEEK_SET):
        self.calls.append(("seek", pos, whence))
        return super().seek(pos, whence)

    def readinto(self, b):
        self.calls.append(("readinto", super().tell(), len(b)))
        return super().readinto(b)

    def read(self, size=-1):
        self.calls.append(("read", super().tell(), size))
        return super().read(size)

    @property
    def seeks(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "seek"]

    @property
    def reads(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("readinto", "read")]


class TrickleStream(io.BytesIO):
    """Returns at most `limit` bytes per readinto, like a pipe or socket."""

    def __init__(self, data: bytes, limit: int = 3):
        super().__init__(data)
        self.limit = limit

    def readinto(self, b):
        return super().readinto(memoryview(b)[: self.limit])


class ReadOnlyStream:
    """Minimal file-like object without fileno, getbuffer or readinto."""

    def __init__(self, data: bytes):
        self._inner = io.BytesIO(data)

    def seek(self, pos, whence=io.SEEK_SET):
        return self._inner.seek(pos, whence)

    def tell(self):
        return self._inner.tell()

    def read(self, size=-1):
        return self._inner.read(size)


@pytest.fixture
def sample() -> bytes:
    return SAMPLE


@pytest.fixture
def spy(sample) -> SpyStream:
    return SpyStream(sample)


@pytest.fixture
def random_bytes() -> bytes:
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=1000, dtype=np.uint8).tobytes()


@pytest.fixture
def sample_file(tmp_path, sample):
    p = tmp_path / "sample.bin"
    p.write_bytes(sample)
    return p


class SpyReadOnlyStream(ReadOnlyStream):
    """ReadOnlyStream that records seeks and reads."""

    def __init__(self, data: bytes):
        super().__init__(data)
        self.calls: list[tuple] = []

    def seek(self, pos, whence=io.SEEK_SET):
        self.calls.append(("seek", pos, whence))
        return super().seek(pos, whence)

    def read(self, size=-1):
        self.calls.append(("read", self.tell(), size))
        return super().read(size)
