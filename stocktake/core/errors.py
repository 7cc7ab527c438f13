from typing import Optional


class StocktakeError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(StocktakeError):
    """Bad, missing or negative input. Raised before anything is written."""

    status_code = 400


class NotFoundError(StocktakeError):
    status_code = 404


class InternalError(StocktakeError):
    status_code = 500


__all__ = ["InternalError", "NotFoundError", "StocktakeError", "ValidationError"]
