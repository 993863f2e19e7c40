from portability_copier.models import ErrorLevel, ProcessError
from portability_copier.utils.error_handler import ErrorHandler


def test_error_handler_collects_failures() -> None:
    handler = ErrorHandler()
    handler.add(ProcessError(code="E-IMPORT", level=ErrorLevel.FATAL, message="quota", resource_id="X"))
    handler.add_fatal(code="E-EXPORT", message="timeout", resource_id="album:A")

    snapshot = handler.snapshot()
    handler.add_fatal(code="E-EXPORT-FATAL", message="gone")

    assert [error.code for error in snapshot] == ["E-IMPORT", "E-EXPORT"]
    assert snapshot[1].level == ErrorLevel.FATAL
    assert len(handler.errors) == 3


def test_process_error_to_dict() -> None:
    error = ProcessError(
        code="W-IMPORT-ITEM", level=ErrorLevel.RECOVERABLE, message="locked", resource_id="photo:1"
    )

    assert error.to_dict() == {
        "code": "W-IMPORT-ITEM",
        "level": "W",
        "message": "locked",
        "resource_id": "photo:1",
    }
