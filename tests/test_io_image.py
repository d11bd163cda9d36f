from __future__ import annotations

import io
import types
from pathlib import Path
from urllib.parse import urlparse

import numpy as np
import pytest
from PIL import Image

import pyimgio.io.image as image_mod
from pyimgio.errors import DecodeError, UnsupportedFormatError
from pyimgio.io.image import (
    coerce_image,
    copy_image,
    encode_image,
    load_image,
    parse_extension,
    save_image,
)
from pyimgio.io.options import WriteOptions


def _rgb_image(width: int = 100, height: int = 50) -> Image.Image:
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[..., 0] = np.arange(width, dtype=np.uint8)[None, :]
    arr[..., 1] = np.arange(height, dtype=np.uint8)[:, None]
    arr[..., 2] = 200
    return Image.fromarray(arr)


def _noise_image(seed: int, size: int = 64) -> Image.Image:
    rng = np.random.default_rng(seed)
    return Image.fromarray(rng.integers(0, 256, size=(size, size, 3), dtype=np.uint8))


def _png_bytes(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.mark.parametrize(
    "path,expected",
    [
        ("a/b/c.jpg", "jpg"),
        ("a.b.png", "png"),
        ("/tmp/photo.JPEG", "JPEG"),
        (Path("out") / "x.gif", "gif"),
    ],
)
def test_parse_extension_takes_last_dot_segment(path, expected) -> None:
    assert parse_extension(path) == expected


def test_load_image_returns_image_unchanged(monkeypatch) -> None:
    image = _rgb_image()

    def _no_decode(*args, **kwargs):
        raise AssertionError("decoder must not be called for an already-decoded image")

    monkeypatch.setattr(Image, "open", _no_decode)

    assert load_image(image) is image
    assert coerce_image(image) is image


def test_load_image_from_str_and_pathlike(tmp_path: Path) -> None:
    path = tmp_path / "src.png"
    _rgb_image().save(path)

    from_str = load_image(str(path))
    from_path = load_image(path)

    for loaded in (from_str, from_path):
        assert loaded.size == (100, 50)
        assert loaded.mode == "RGB"
    assert np.array_equal(np.asarray(from_str), np.asarray(from_path))


def test_load_image_detects_format_by_content(tmp_path: Path) -> None:
    path = tmp_path / "actually_png.jpg"
    path.write_bytes(_png_bytes(_rgb_image(8, 4)))

    loaded = load_image(path)
    assert loaded.format == "PNG"
    assert loaded.size == (8, 4)


def test_load_image_from_file_handle_leaves_it_open() -> None:
    handle = io.BytesIO(_png_bytes(_rgb_image(6, 3)))

    loaded = load_image(handle)

    assert loaded.size == (6, 3)
    assert not handle.closed


def test_load_image_from_file_url_and_parsed_url(tmp_path: Path) -> None:
    path = tmp_path / "url src.png"
    _rgb_image(10, 5).save(path)
    uri = path.as_uri()

    assert load_image(uri).size == (10, 5)
    assert load_image(urlparse(uri)).size == (10, 5)


def test_load_image_from_http_url_uses_requests(monkeypatch) -> None:
    payload = _png_bytes(_rgb_image(4, 2))
    seen: dict[str, object] = {}

    class FakeRequestException(Exception):
        pass

    class FakeResponse:
        content = payload

        def raise_for_status(self) -> None:
            return None

    def fake_get(url, timeout):
        seen["url"] = url
        seen["timeout"] = timeout
        return FakeResponse()

    fake_requests = types.SimpleNamespace(get=fake_get, RequestException=FakeRequestException)
    monkeypatch.setattr(image_mod, "require", lambda *args, **kwargs: fake_requests)

    loaded = load_image("https://example.com/img.png", timeout=5)

    assert loaded.size == (4, 2)
    assert seen == {"url": "https://example.com/img.png", "timeout": 5.0}


def test_load_image_http_failure_raises_decode_error(monkeypatch) -> None:
    class FakeRequestException(Exception):
        pass

    def fake_get(url, timeout):
        raise FakeRequestException("connection refused")

    fake_requests = types.SimpleNamespace(get=fake_get, RequestException=FakeRequestException)
    monkeypatch.setattr(image_mod, "require", lambda *args, **kwargs: fake_requests)

    with pytest.raises(DecodeError) as exc:
        load_image("http://example.com/missing.png")
    assert isinstance(exc.value.__cause__, FakeRequestException)


def test_load_image_rejects_bad_timeout() -> None:
    with pytest.raises(ValueError, match="timeout"):
        load_image("http://example.com/a.png", timeout=0)


def test_load_image_missing_path_raises_decode_error(tmp_path: Path) -> None:
    with pytest.raises(DecodeError):
        load_image(tmp_path / "missing.png")


def test_load_image_non_image_bytes_raise_decode_error(tmp_path: Path) -> None:
    path = tmp_path / "garbage.png"
    path.write_bytes(b"definitely not an image")

    with pytest.raises(DecodeError):
        load_image(path)

    with pytest.raises(DecodeError):
        load_image(io.BytesIO(b"nope"))


def test_load_image_rejects_unknown_resource_type() -> None:
    with pytest.raises(TypeError):
        load_image(42)


def test_copy_image_is_independent() -> None:
    original = _rgb_image()
    duplicate = copy_image(original)

    assert duplicate is not original
    assert duplicate.size == original.size
    assert duplicate.mode == original.mode
    assert np.array_equal(np.asarray(duplicate), np.asarray(original))

    before = original.getpixel((0, 0))
    duplicate.putpixel((0, 0), (1, 2, 3))
    assert original.getpixel((0, 0)) == before

    original.putpixel((1, 1), (9, 9, 9))
    assert duplicate.getpixel((1, 1)) != (9, 9, 9)


def test_copy_image_of_crop_has_region_size() -> None:
    big = _rgb_image()
    region = big.crop((10, 10, 30, 20))

    duplicate = copy_image(region)

    assert duplicate.size == (20, 10)
    source_pixel = big.getpixel((10, 10))
    assert duplicate.getpixel((0, 0)) == source_pixel

    duplicate.putpixel((0, 0), (255, 255, 255))
    assert big.getpixel((10, 10)) == source_pixel
    assert region.getpixel((0, 0)) == source_pixel


def test_copy_image_keeps_palette() -> None:
    image = _rgb_image(16, 16).convert("P")
    duplicate = copy_image(image)

    assert duplicate.mode == "P"
    assert duplicate.getpalette() == image.getpalette()


def test_copy_image_rejects_non_image() -> None:
    with pytest.raises(TypeError):
        copy_image(np.zeros((2, 2, 3), dtype=np.uint8))


def test_save_jpeg_scenario(tmp_path: Path) -> None:
    image = _rgb_image(100, 50)
    path = str(tmp_path / "t.jpg")

    returned = save_image(image, path, quality=1.0)

    assert returned == path
    data = Path(path).read_bytes()
    assert data[:3] == b"\xff\xd8\xff"
    with Image.open(path) as reloaded:
        assert reloaded.format == "JPEG"
        assert reloaded.size == (100, 50)
        assert reloaded.mode == "RGB"


def test_save_png_ignores_progressive_and_quality(tmp_path: Path) -> None:
    image = _rgb_image(100, 50)
    path = tmp_path / "t.png"

    returned = save_image(image, path, progressive=True, quality=0.0)

    assert returned == str(path)
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


@pytest.mark.parametrize("ext", ["png", "bmp", "tif"])
def test_lossless_round_trip_is_pixel_exact(tmp_path: Path, ext: str) -> None:
    image = _rgb_image(37, 21)
    path = tmp_path / f"round.{ext}"

    reloaded = load_image(save_image(image, path, quality=0.1))

    assert reloaded.size == image.size
    assert reloaded.mode == image.mode
    assert np.array_equal(np.asarray(reloaded), np.asarray(image))


def test_lossy_round_trip_keeps_size_and_mode(tmp_path: Path) -> None:
    image = _rgb_image(37, 21)
    reloaded = load_image(save_image(image, tmp_path / "round.jpeg", quality=0.5))

    assert reloaded.size == image.size
    assert reloaded.mode == image.mode


def test_jpeg_quality_is_monotonic_in_size() -> None:
    for seed in range(3):
        image = _noise_image(seed)
        high = encode_image(image, "jpg", quality=1.0)
        low = encode_image(image, "jpg", quality=0.2)
        assert len(high) >= len(low)


def test_progressive_flag_controls_jpeg_output(tmp_path: Path) -> None:
    image = _rgb_image(64, 64)

    on = tmp_path / "on.jpg"
    off = tmp_path / "off.jpg"
    save_image(image, on, progressive=True)
    save_image(image, off, progressive=False)

    with Image.open(on) as reloaded:
        assert reloaded.info.get("progressive")
    with Image.open(off) as reloaded:
        assert not reloaded.info.get("progressive")


def test_progressive_default_copies_source_metadata(tmp_path: Path) -> None:
    source = tmp_path / "source.jpg"
    save_image(_rgb_image(64, 64), source, progressive=True)

    copied = tmp_path / "copied.jpg"
    save_image(load_image(source), copied)

    with Image.open(copied) as reloaded:
        assert reloaded.info.get("progressive")


def test_save_unsupported_extension_raises_without_creating_file(tmp_path: Path) -> None:
    path = tmp_path / "out.unknownext"

    with pytest.raises(UnsupportedFormatError):
        save_image(_rgb_image(), path)
    assert not path.exists()


def test_save_without_extension_raises_unsupported_format(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedFormatError):
        save_image(_rgb_image(), tmp_path / "noext")


def test_save_to_missing_directory_propagates_io_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        save_image(_rgb_image(), tmp_path / "missing" / "out.png")


def test_save_encoder_failure_propagates(tmp_path: Path) -> None:
    rgba = _rgb_image(8, 8).convert("RGBA")
    path = tmp_path / "rgba.jpg"

    with pytest.raises(OSError):
        save_image(rgba, path)


def test_save_merges_options_and_overrides(tmp_path: Path, monkeypatch) -> None:
    seen: dict[str, object] = {}
    original_save = Image.Image.save

    def spy_save(self, fp, format=None, **params):
        seen["format"] = format
        seen["params"] = dict(params)
        return original_save(self, fp, format=format, **params)

    monkeypatch.setattr(Image.Image, "save", spy_save)

    save_image(_rgb_image(), tmp_path / "x.jpg", WriteOptions(quality=0.5, progressive=False), quality=0.9)

    assert seen["format"] == "JPEG"
    assert seen["params"] == {"quality": 90, "progressive": False}


def test_save_rejects_unknown_override(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        save_image(_rgb_image(), tmp_path / "x.jpg", optimize=True)


def test_save_rejects_out_of_range_quality(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="quality"):
        save_image(_rgb_image(), tmp_path / "x.jpg", quality=1.5)


def test_encode_image_accepts_pillow_format_name() -> None:
    data = encode_image(_rgb_image(8, 8), "PNG")
    assert data[:4] == b"\x89PNG"

    with pytest.raises(UnsupportedFormatError):
        encode_image(_rgb_image(8, 8), "unknownext")


def test_load_image_oversized_image_raises_decode_error(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "huge.png"
    Image.new("RGB", (300, 300)).save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(DecodeError) as exc:
        load_image(path)
    assert isinstance(exc.value.__cause__, Image.DecompressionBombError)


@pytest.mark.parametrize("not_an_image", ["not-an-image", np.zeros((4, 4, 3), dtype=np.uint8)])
def test_save_rejects_non_image_without_touching_destination(tmp_path: Path, not_an_image) -> None:
    path = tmp_path / "keep.png"
    _rgb_image(8, 8).save(path)
    size_before = path.stat().st_size

    with pytest.raises(TypeError):
        save_image(not_an_image, path)
    assert path.stat().st_size == size_before


def test_encode_image_rejects_non_image() -> None:
    with pytest.raises(TypeError):
        encode_image(b"raw bytes", "png")
