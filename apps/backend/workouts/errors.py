from __future__ import annotations


class WorkoutError(Exception):
    status_code = 400
    message = "Unable to process workout"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def payload(self) -> dict:
        return {"error": self.message}


class ValidationError(WorkoutError):
    message = "Validation failed"

    def __init__(self, fields: list[str], details: list[dict] | None = None, message: str | None = None):
        super().__init__(message)
        self.fields = list(dict.fromkeys(fields))
        self.details = list(details or [])

    def payload(self) -> dict:
        return {"error": self.message, "empty_fields": self.fields, "details": self.details}


class NotFoundError(WorkoutError):
    # Missing ids and ids owned by someone else look the same to the caller.
    status_code = 404
    message = "Workout not found"


class DuplicateError(WorkoutError):
    message = "A workout with this title already exists on this day"

    def payload(self) -> dict:
        return {"error": self.message, "empty_fields": ["title"]}


class TransientStoreError(WorkoutError):
    status_code = 503
    message = "Workout store temporarily unavailable"
