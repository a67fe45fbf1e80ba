from fastapi import status


class AccountError(Exception):
    """Base for expected failures raised by the service layer."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AccountError):
    default_message = "All fields must be filled"


class NotFound(AccountError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class InvalidCredentials(AccountError):
    default_message = "Invalid credentials"


class InvalidOrExpired(AccountError):
    default_message = "Invalid or expired OTP"


class NotVerified(AccountError):
    default_message = "User is not verified"


class EmailAlreadyRegistered(AccountError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already registered"


class Forbidden(AccountError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed to modify this profile"


class ChatUnavailable(AccountError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to get a response from the AI."
