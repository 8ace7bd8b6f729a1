from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class NoApproverAvailableError(BaseAppException):
    """Raised when a request cannot be routed to anyone."""
    def __init__(self, detail: str = "No approver available. Contact HR."):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
