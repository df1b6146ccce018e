import threading

import pytest

from pixelshop.models.errors import InvalidArgumentError, NotFoundError
from pixelshop.models.pixel_buffer import PixelBuffer
from pixelshop.repositories.image_registry import ImageRegistry


def test_get_unknown_name_raises_not_found():
    registry = ImageRegistry()
    with pytest.raises(NotFoundError) as exc:
        registry.get("missing")
    assert "must be loaded first" in str(exc.value)
    assert exc.value.name == "missing"


def test_not_found_is_a_key_error():
    with pytest.raises(KeyError):
        ImageRegistry().get("nope")


def test_put_then_get_returns_same_buffer(white_2x2):
    registry = ImageRegistry()
    registry.put("a", white_2x2)
    assert registry.get("a") is white_2x2


def test_put_overwrites(white_2x2, gradient_4x4):
    registry = ImageRegistry()
    registry.put("a", white_2x2)
    registry.put("a", gradient_4x4)
    assert registry.get("a") is gradient_4x4
    assert len(registry) == 1


def test_put_rejects_non_buffers():
    registry = ImageRegistry()
    with pytest.raises(InvalidArgumentError):
        registry.put("a", None)
    assert "a" not in registry


def test_names_and_membership(white_2x2):
    registry = ImageRegistry()
    registry.put("b", white_2x2)
    registry.put("a", white_2x2)
    assert registry.names() == ["a", "b"]
    assert "a" in registry
    assert "c" not in registry


def test_concurrent_puts_all_land():
    registry = ImageRegistry()
    buf = PixelBuffer.filled(1, 1, (1, 2, 3))

    def worker(prefix):
        for i in range(200):
            registry.put(f"{prefix}-{i}", buf)

    threads = [threading.Thread(target=worker, args=(p,)) for p in "abcd"]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(registry) == 800
