from __future__ import annotations

from collections.abc import Mapping

from app.authoring.constants import GENERIC_ERROR_MESSAGE


class AuthoringError(Exception):
    code = "E_AUTHORING"
    message = "Authoring operation failed."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class AuthoringValidationError(AuthoringError):
    code = "E_VALIDATION"
    message = "Validation failed."


class EmptyQuestionTextError(AuthoringValidationError):
    code = "E_EMPTY_QUESTION_TEXT"
    message = "Question text cannot be empty."


class EmptyOptionTextError(AuthoringValidationError):
    code = "E_EMPTY_OPTION_TEXT"
    message = "All option texts must be filled for multiple choice questions."


class InvalidCorrectCountError(AuthoringValidationError):
    code = "E_INVALID_CORRECT_COUNT"
    message = "Single-answer and True/False questions must have exactly one correct option."


class InvalidOptionCountError(AuthoringValidationError):
    code = "E_INVALID_OPTION_COUNT"
    message = "Multiple choice questions must have between 2 and 6 options."


class InvalidTrueFalseOptionsError(AuthoringValidationError):
    code = "E_INVALID_TRUE_FALSE_OPTIONS"
    message = "True/False questions must have exactly the options True and False."


class EmptyCategoriesError(AuthoringValidationError):
    code = "E_EMPTY_CATEGORIES"
    message = "Please provide at least one category."


class EmptyBankNameError(AuthoringValidationError):
    code = "E_EMPTY_BANK_NAME"
    message = "Question bank name cannot be empty."


class MissingBankSourceError(AuthoringValidationError):
    code = "E_MISSING_BANK_SOURCE"
    message = "Please select a source for this question bank."


class EmptyCategoryNameError(AuthoringValidationError):
    code = "E_EMPTY_CATEGORY_NAME"
    message = "Category name cannot be empty."


class DuplicateCategoryError(AuthoringValidationError):
    code = "E_DUPLICATE_CATEGORY"
    message = "This category already exists."


class CategoryLimitError(AuthoringValidationError):
    code = "E_CATEGORY_LIMIT"
    message = "Maximum number of categories reached."


class InvalidQuestionCountError(AuthoringValidationError):
    code = "E_INVALID_QUESTION_COUNT"
    message = "Target question count must be a positive number."


class AuthoringStateError(AuthoringError):
    code = "E_STATE"


class NoChangesDetectedError(AuthoringStateError):
    code = "E_NO_CHANGES"
    message = "No changes detected to save."


class BatchInProgressError(AuthoringStateError):
    code = "E_BATCH_IN_PROGRESS"
    message = "Another operation is still in progress."


class UnknownQuestionError(AuthoringStateError):
    code = "E_UNKNOWN_QUESTION"
    message = "Question is not part of this review."


class NoQuestionsGeneratedError(AuthoringStateError):
    code = "E_NO_QUESTIONS_GENERATED"
    message = (
        "The AI did not generate any questions for the given criteria. "
        "Try adjusting the categories or context."
    )


class ExternalServiceError(AuthoringError):
    code = "E_EXTERNAL"
    message = GENERIC_ERROR_MESSAGE

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
        server_errors: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message
        self.server_errors = dict(server_errors or {})

    @property
    def user_message(self) -> str:
        return format_error_message(self)


def format_error_message(exc: BaseException) -> str:
    """User-facing text for a failed call: server message, then server field errors, then the exception text."""
    if isinstance(exc, ExternalServiceError):
        if exc.server_message:
            return exc.server_message
        if exc.server_errors:
            joined = ", ".join(str(value) for value in exc.server_errors.values())
            return joined or "Validation failed."
    if isinstance(exc, AuthoringError):
        return exc.message
    text = str(exc).strip()
    return text or GENERIC_ERROR_MESSAGE
