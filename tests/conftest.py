import asyncio
import io

import pytest
from PIL import Image

from spritecache.cache.disk import DiskStore
from spritecache.cache.manager import ImageCacheManager
from spritecache.errors.exceptions import FetchError


def make_image(color=(255, 0, 0, 255), size=(4, 4), mode="RGBA") -> Image.Image:
    fill = color[0] if len(mode) == 1 else color[: len(mode)]
    return Image.new(mode, size, fill)


def png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class CountingDiskStore(DiskStore):
    """DiskStore that records how often it is read."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.get_calls = 0

    def get(self, key):
        self.get_calls += 1
        return super().get(key)


class FakeTransport:
    """In-memory transport: records calls, can hold, fail or raise for specific URLs."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []
        self.failures: set[str] = set()
        self.errors: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.closed = False

    def hold(self, url: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[url] = gate
        return gate

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()
        if url in self.errors:
            raise self.errors[url]
        if url in self.failures:
            raise FetchError(f"boom: {url}", url=url, transient=True)
        if url not in self.responses:
            raise FetchError(f"HTTP 404 for {url}", url=url, http_status=404)
        return self.responses[url]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def red_image():
    return make_image((255, 0, 0, 255))


@pytest.fixture
def blue_image():
    return make_image((0, 0, 255, 255))


@pytest.fixture
def counting_disk(tmp_path):
    return CountingDiskStore(cache_dir=tmp_path / "images")


@pytest.fixture
def manager(tmp_path, counting_disk):
    mgr = ImageCacheManager(disk=counting_disk, sweep_on_start=False)
    yield mgr
    mgr.close()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def to_png():
    return png_bytes
