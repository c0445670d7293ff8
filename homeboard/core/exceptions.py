"""
Domain errors raised by the service layer.
Endpoints translate them into HTTP responses.
"""


class HomeboardError(Exception):
    """Base class for all domain errors"""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(HomeboardError):
    """Malformed input: empty content, bad week key, overlapping blocks"""


class NotFoundError(HomeboardError):
    """Referenced message, user or schedule slot does not exist"""


class UnknownUserError(NotFoundError):
    """User id is not part of the household"""

    def __init__(self, user_id: int):
        super().__init__(f"Unknown user: {user_id}")
        self.user_id = user_id


class AuthorizationError(HomeboardError):
    """Requester is not allowed to perform the action"""


class StoreError(HomeboardError):
    """The database failed or timed out"""
