from app.core.exceptions import (
    AppError,
    AssignmentValidationError,
    InvalidStateError,
    ResourceNotFoundError,
    StoreError,
)


def test_resource_not_found_error_structure():
    err = ResourceNotFoundError("Teacher", "t-1")
    assert err.status_code == 404
    assert err.message == "Teacher with id t-1 not found"
    assert err.resource_type == "Teacher"
    assert isinstance(err, AppError)


def test_assignment_validation_error_keeps_every_message():
    err = AssignmentValidationError(["Teacher is currently not available", "Teacher is not qualified to teach Physics"])
    assert err.status_code == 400
    assert err.details == {"errors": err.errors}
    assert len(err.errors) == 2


def test_state_and_store_errors():
    assert InvalidStateError("Leave request is already approved").status_code == 409
    store_error = StoreError("write failed", details={"error": "disk I/O error"})
    assert store_error.status_code == 503
    assert store_error.details["error"] == "disk I/O error"


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_app_error_handler_formats_response(client):
    response = client.get("/api/classes/missing-class/conflicts")
    assert response.status_code == 404
    payload = response.json()
    assert payload["message"] == "Class with id missing-class not found"
    assert payload["details"] == {}
