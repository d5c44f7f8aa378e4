from typing import Any, Dict, Optional

from fastapi import status


class BookApiException(Exception):
    """Base exception for every application error of the Book API"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"
    message: str = "Internal server error"
    details: Optional[Dict[str, Any]] = None

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        if message:
            self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        if details:
            self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception into an API response body"""
        response = {"error_code": self.error_code, "message": self.message}
        if self.details:
            response["details"] = self.details
        return response

    def with_details(self, details: Dict[str, Any]) -> "BookApiException":
        """Attach details to the exception"""
        self.details = details
        return self

    def __str__(self) -> str:
        result = f"{self.error_code}: {self.message}"
        if self.details:
            result += f" (Details: {self.details})"
        return result


# Authentication


class InvalidCredentialsException(BookApiException):
    """Wrong email or password"""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "invalid_credentials"
    message = "Invalid email or password"


class ConfigurationException(BookApiException):
    """Required configuration is missing"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "configuration_error"
    message = "Server is misconfigured"


# Users


class UserAlreadyExistsException(BookApiException):
    """A user with this email is already registered"""

    status_code = status.HTTP_409_CONFLICT
    error_code = "user_already_exists"
    message = "User with this email already exists"


class InvalidUserDataException(BookApiException):
    """User data was rejected"""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_user_data"
    message = "User creation failed"


# Authors


class AuthorNotFoundException(BookApiException):
    """Author does not exist"""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "author_not_found"
    message = "Author not found"


class InvalidAuthorDataException(BookApiException):
    """Author data was rejected"""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_author_data"
    message = "Invalid author data"


# Books


class BookNotFoundException(BookApiException):
    """Book does not exist"""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "book_not_found"
    message = "Book not found"


class InvalidBookDataException(BookApiException):
    """Book data was rejected"""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_book_data"
    message = "Invalid book data"


# Generic


class ValidationException(BookApiException):
    """Request body or parameters are malformed"""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "validation_error"
    message = "Validation failed"


class DatabaseException(BookApiException):
    """Unhandled persistence failure"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "database_error"
    message = "Database error"
