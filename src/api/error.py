from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)

    @classmethod
    def unauthorized(cls, message: str = "Invalid or expired token") -> "ClientError":
        return cls(Error("UNAUTHORIZED", message), status_code=status.HTTP_401_UNAUTHORIZED)

    @classmethod
    def forbidden(cls, message: str) -> "ClientError":
        return cls(Error("FORBIDDEN", message), status_code=status.HTTP_403_FORBIDDEN)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)
