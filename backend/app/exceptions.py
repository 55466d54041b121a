from fastapi import HTTPException


class NotFoundError(HTTPException):
    """Budget or item is absent, or not owned by the caller"""
    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)


class InvalidInputError(HTTPException):
    """Request violates a range or business rule"""
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)


class ConflictOnCreateError(HTTPException):
    """A concurrent request created the same monthly budget"""
    def __init__(self, detail: str = "Monthly budget was created concurrently"):
        super().__init__(status_code=409, detail=detail)


class UpstreamFailureError(HTTPException):
    """A collaborator store could not complete a read or write"""
    def __init__(self, detail: str):
        super().__init__(status_code=502, detail=detail)
