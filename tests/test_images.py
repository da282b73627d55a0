import pytest

from profile_directory.directory.images import (
    Durable,
    ImageStore,
    PendingLocalBytes,
    Unset,
    format_reference,
    parse_reference,
)
from profile_directory.errors import ImageNotFoundError


def test_oldest_pending_upload_is_evicted_past_the_count_cap(tmp_path):
    images = ImageStore(tmp_path / "media", max_pending=3)
    handles = [images.stage(bytes([i]) * 1024, "image/png") for i in range(5)]

    assert images.pending_count == 3
    assert images.promote(handles[0]) == Unset()
    assert images.promote(handles[1]) == Unset()
    with pytest.raises(ImageNotFoundError):
        images.load(handles[0])

    promoted = images.promote(handles[4])
    assert isinstance(promoted, Durable)
    assert images.pending_count == 2


def test_byte_cap_bounds_pending_memory(tmp_path):
    images = ImageStore(tmp_path / "media", max_pending=100, max_pending_bytes=4096)
    handles = [images.stage(b"x" * 1024, "image/jpeg") for _ in range(10)]

    assert images.pending_count == 4
    assert images.load(handles[-1]) == (b"x" * 1024, "image/jpeg")
    assert images.promote(handles[0]) == Unset()


def test_many_abandoned_uploads_stay_bounded(tmp_path):
    images = ImageStore(tmp_path / "media")
    for _ in range(1000):
        images.stage(b"y" * 1024, "image/png")
    assert images.pending_count == images.max_pending


def test_reference_parsing():
    assert parse_reference("") == Unset()
    assert parse_reference("pending:abc") == PendingLocalBytes("abc")
    assert parse_reference("media:a.png") == Durable("media:a.png")
    assert format_reference(PendingLocalBytes("abc")) == "pending:abc"
    assert format_reference(Unset()) == ""
