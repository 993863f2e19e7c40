from dataclasses import FrozenInstanceError

import pytest

from portability_copier.models import (
    AuthData,
    ContinuationRecord,
    ExportOutcome,
    ExportRequest,
    ImportOutcome,
    PaginationToken,
    PhotoModel,
    PhotosContainerResource,
    ResourceNode,
    ResultType,
)


def test_continuation_record_of_wraps_token() -> None:
    record = ContinuationRecord.of("page-2", [ResourceNode("X")])

    assert record.next_token == PaginationToken("page-2")
    assert record.children == (ResourceNode("X"),)
    assert record.is_empty() is False


def test_empty_continuation_record() -> None:
    assert ContinuationRecord().is_empty() is True
    assert ContinuationRecord.of(None, []).is_empty() is True


def test_continuation_record_is_immutable() -> None:
    children = [ResourceNode("X")]
    record = ContinuationRecord(children=children)
    children.append(ResourceNode("Y"))

    assert record.children == (ResourceNode("X"),)
    with pytest.raises(FrozenInstanceError):
        record.next_token = PaginationToken("t")


def test_export_request_describe() -> None:
    assert ExportRequest().describe() == "<root>"
    request = ExportRequest(token=PaginationToken("photo:50"), resource=ResourceNode("A"))
    assert request.describe() == "A@photo:50"


def test_export_outcome_continuation() -> None:
    ended = ExportOutcome.ended(["a"], ContinuationRecord())
    assert ended.result_type == ResultType.END
    assert ended.has_continuation() is False

    ended_with_children = ExportOutcome.ended(["a"], ContinuationRecord.of(None, [ResourceNode("X")]))
    assert ended_with_children.has_continuation() is True

    error = ExportOutcome.error("timeout")
    assert error.is_error is True
    assert error.message == "timeout"


def test_import_outcome() -> None:
    assert ImportOutcome.ok().is_error is False
    assert ImportOutcome.error("quota").message == "quota"


def test_auth_data_repr_masks_secrets() -> None:
    auth = AuthData(token="abc123", secret="s3cret", url="https://example.test")

    text = repr(auth)

    assert "abc123" not in text
    assert "s3cret" not in text
    assert "https://example.test" in text


def test_photos_container_emptiness() -> None:
    photo = PhotoModel(
        title="IMG_0001.JPG",
        fetchable_url="/src/A/IMG_0001.JPG",
        data_id="A/IMG_0001.JPG",
        album_id="A",
        resolution=(4000, 3000),
    )

    assert PhotosContainerResource().is_empty() is True
    assert PhotosContainerResource(photos=[photo]).is_empty() is False
