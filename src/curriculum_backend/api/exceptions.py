from fastapi import HTTPException, status
from typing import Any, Dict, Optional

# Every failure body is {"code": <kind>, "message": <details>} so callers can
# tell the kinds apart without parsing messages.

def _detail(code: str, detail: Any, default: str) -> Dict[str, Any]:
    return {"code": code, "message": detail if detail is not None else default}

class NotFoundException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_404_NOT_FOUND
        self.detail = _detail("NotFound", detail, "Not found")

class ForbiddenException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_403_FORBIDDEN
        self.detail = _detail("Forbidden", detail, "You do not have permission to access this resource")

class ValidationFailedException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_400_BAD_REQUEST
        self.detail = _detail("ValidationError", detail, "Bad request")

class InvalidHierarchyException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_409_CONFLICT
        self.detail = _detail("InvalidHierarchy", detail, "Invalid curriculum hierarchy")

class UnauthorizedException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_401_UNAUTHORIZED
        self.detail = _detail("Unauthenticated", detail, "You must be logged in to access this resource")

class StorageException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        self.detail = _detail("StorageError", detail, "Storage unavailable")
