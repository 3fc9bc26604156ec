"""Application error codes and the exception that carries them to the client."""

from enum import Enum
from typing import Any, NoReturn

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Stable error codes returned in the ``error_code`` field."""

    EMPTY_IMPORT_BATCH = "EMPTY_IMPORT_BATCH"
    IMPORT_DECODE_ERROR = "IMPORT_DECODE_ERROR"
    IMPORT_TOO_LARGE = "IMPORT_TOO_LARGE"
    QUESTION_NOT_FOUND = "QUESTION_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_NOT_FINISHED = "SESSION_NOT_FINISHED"
    NOT_ENOUGH_QUESTIONS = "NOT_ENOUGH_QUESTIONS"


STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.EMPTY_IMPORT_BATCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.IMPORT_DECODE_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.IMPORT_TOO_LARGE: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ErrorCode.QUESTION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SESSION_NOT_FINISHED: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_ENOUGH_QUESTIONS: status.HTTP_400_BAD_REQUEST,
}


class AppError(HTTPException):
    """HTTPException whose status follows from its error code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
    ):
        super().__init__(
            status_code=STATUS_BY_CODE[code],
            detail={"code": code.value, "message": message, "details": details},
        )
        self.code = code.value
        self.message = message
        self.details = details


def raise_app_error(
    code: ErrorCode,
    message: str,
    details: dict[str, Any] | list[Any] | None = None,
) -> NoReturn:
    raise AppError(code, message, details)
