from pathlib import Path
from unittest.mock import patch

import pytest

from portability_copier.utils import file_ops
from portability_copier.utils.cancel import CancelledError, CancellationToken


def test_copy_into_creates_directory(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    src.write_text("hello", encoding="utf-8")

    dst = file_ops.copy_into(src, tmp_path / "nested" / "album")

    assert dst == tmp_path / "nested" / "album" / "source.txt"
    assert dst.read_text(encoding="utf-8") == "hello"
    assert src.exists()


def test_copy_into_refuses_to_overwrite(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    src.write_text("hello", encoding="utf-8")
    album = tmp_path / "album"
    album.mkdir()
    (album / "source.txt").write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        file_ops.copy_into(src, album)

    assert (album / "source.txt").read_text(encoding="utf-8") == "existing"


def test_copy_into_raises_after_retries(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    src.write_text("hello", encoding="utf-8")

    with patch("portability_copier.utils.file_ops.time.sleep", return_value=None), patch(
        "portability_copier.utils.file_ops.shutil.copy2",
        side_effect=OSError("Network error"),
    ):
        with pytest.raises(OSError, match="Network error"):
            file_ops.copy_into(src, tmp_path / "album")


def test_safe_copy2_retry_success(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    dst = tmp_path / "dest.txt"
    src.write_text("hello", encoding="utf-8")

    with patch("portability_copier.utils.file_ops.time.sleep", return_value=None), patch(
        "portability_copier.utils.file_ops.shutil.copy2",
        side_effect=[OSError("Network error"), OSError("Network error"), None],
    ):
        result = file_ops.safe_copy2(
            src,
            dst,
            max_retries=5,
            backoff_base_sec=0.01,
            backoff_cap_sec=0.01,
        )

    assert result.success is True
    assert result.retry_count == 2


def test_safe_copy2_retry_failed(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    dst = tmp_path / "dest.txt"
    src.write_text("hello", encoding="utf-8")

    with patch("portability_copier.utils.file_ops.time.sleep", return_value=None), patch(
        "portability_copier.utils.file_ops.shutil.copy2",
        side_effect=OSError("Network error"),
    ):
        result = file_ops.safe_copy2(
            src,
            dst,
            max_retries=2,
            backoff_base_sec=0.01,
            backoff_cap_sec=0.01,
        )

    assert result.success is False
    assert result.retry_count == 2
    assert result.error_message is not None
    assert "Network error" in result.error_message


def test_safe_copy2_cancelled(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    src.write_text("hello", encoding="utf-8")
    token = CancellationToken()
    token.set()

    with pytest.raises(CancelledError):
        file_ops.safe_copy2(src, tmp_path / "dest.txt", cancel_token=token)

    assert not (tmp_path / "dest.txt").exists()


def test_copy_into_accepts_identical_destination(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    src.write_text("hello", encoding="utf-8")
    album = tmp_path / "album"
    album.mkdir()
    (album / "source.txt").write_text("hello", encoding="utf-8")

    with patch("portability_copier.utils.file_ops.shutil.copy2") as copy_mock:
        dst = file_ops.copy_into(src, album)

    assert dst == album / "source.txt"
    copy_mock.assert_not_called()


def test_copy_into_leaves_no_partial_file(tmp_path: Path) -> None:
    src = tmp_path / "source.txt"
    src.write_text("hello", encoding="utf-8")
    album = tmp_path / "album"

    file_ops.copy_into(src, album)

    assert sorted(path.name for path in album.iterdir()) == ["source.txt"]


def test_same_content_compares_bytes(tmp_path: Path) -> None:
    first = tmp_path / "a.bin"
    second = tmp_path / "b.bin"
    first.write_bytes(b"abcd")
    second.write_bytes(b"abce")

    assert file_ops.same_content(first, first) is True
    assert file_ops.same_content(first, second) is False
