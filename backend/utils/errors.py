from fastapi import HTTPException


class AuthError(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=401, detail=detail)


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=400, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Product not found"):
        super().__init__(status_code=404, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Product id already exists"):
        super().__init__(status_code=409, detail=detail)


class StoreError(HTTPException):
    """Backend failure. The detail is generic; the cause is logged where it happens."""

    def __init__(self, operation: str, detail: str = "Storage error"):
        super().__init__(status_code=500, detail=detail)
        self.operation = operation
