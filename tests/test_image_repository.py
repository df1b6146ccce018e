import numpy as np
import pytest
from PIL import Image as PILImage

from pixelshop.models.errors import DecodeError, EncodeError
from pixelshop.models.pixel_buffer import PixelBuffer
from pixelshop.repositories.image_repository import ImageRepository


@pytest.fixture
def repo() -> ImageRepository:
    return ImageRepository()


@pytest.mark.parametrize("ext", [".png", ".bmp", ".ppm"])
def test_lossless_formats_round_trip(repo, tmp_path, random_buffer, ext):
    path = tmp_path / f"img{ext}"
    repo.save(random_buffer, path)
    assert repo.load(path) == random_buffer


def test_jpeg_keeps_dimensions(repo, tmp_path, random_buffer):
    path = tmp_path / "img.jpg"
    repo.save(random_buffer, path)
    loaded = repo.load(path)
    assert (loaded.width, loaded.height) == (random_buffer.width, random_buffer.height)


def test_loads_rgb_order(repo, tmp_path):
    path = tmp_path / "red.png"
    PILImage.fromarray(np.array([[[255, 0, 0], [0, 0, 255]]], dtype=np.uint8)).save(path)
    buf = repo.load(path)
    assert buf.get(0, 0) == (255, 0, 0)
    assert buf.get(1, 0) == (0, 0, 255)


def test_reads_binary_ppm(repo, tmp_path):
    path = tmp_path / "tiny.ppm"
    path.write_bytes(b"P6\n2 1\n255\n" + bytes([1, 2, 3, 4, 5, 6]))
    assert repo.load(path).to_list() == [(1, 2, 3), (4, 5, 6)]


def test_extension_is_case_insensitive(repo, tmp_path, random_buffer):
    path = tmp_path / "UPPER.PNG"
    repo.save(random_buffer, path)
    assert repo.load(path) == random_buffer


def test_greyscale_file_becomes_three_channels(repo, tmp_path):
    path = tmp_path / "grey.png"
    PILImage.fromarray(np.full((2, 3), 77, dtype=np.uint8)).save(path)
    buf = repo.load(path)
    assert buf.to_list() == [(77, 77, 77)] * 6


def test_unsupported_extension(repo, tmp_path):
    path = tmp_path / "anim.gif"
    path.write_bytes(b"GIF89a")
    with pytest.raises(DecodeError):
        repo.load(path)


def test_missing_file(repo, tmp_path):
    with pytest.raises(DecodeError):
        repo.load(tmp_path / "missing.png")


def test_corrupt_file(repo, tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(DecodeError):
        repo.load(path)


def test_save_unsupported_extension(repo, tmp_path, white_2x2):
    with pytest.raises(EncodeError):
        repo.save(white_2x2, tmp_path / "out.tiff")


def test_save_into_missing_directory(repo, tmp_path, white_2x2):
    with pytest.raises(EncodeError):
        repo.save(white_2x2, tmp_path / "no" / "such" / "dir" / "out.png")


def test_encode_png_bytes(repo, white_2x2):
    data = repo.encode(white_2x2, "png")
    assert data.startswith(b"\x89PNG")


def test_encode_unknown_format(repo, white_2x2):
    with pytest.raises(EncodeError):
        repo.encode(white_2x2, "webp")


def test_extensions_from_environment(monkeypatch, tmp_path, white_2x2):
    monkeypatch.setenv("VALID_IMAGE_EXTENSIONS", "png")
    repo = ImageRepository()
    assert repo.is_supported("a.PNG")
    assert not repo.is_supported("a.bmp")
    with pytest.raises(EncodeError):
        repo.save(white_2x2, tmp_path / "a.bmp")
