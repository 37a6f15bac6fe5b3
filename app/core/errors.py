from typing import Optional
from fastapi import HTTPException, status


class SbomError(Exception):
    """Base class for errors raised while serving SBOM results"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "SBOM request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class EntityNotFound(SbomError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Entity not found"


class UnknownWorkspace(SbomError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Workspace not found"


class NotAuthorized(SbomError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to access this analysis"


class PluginResultNotAvailable(SbomError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "SBOM results are not available for this analysis"


class PluginFailed(SbomError):
    default_message = "Every SBOM plugin failed for this analysis"


class InvalidEcosystem(SbomError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid ecosystem filter"


class GraphTooLarge(SbomError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Dependency graph is too large to traverse"


def to_http_exception(error: SbomError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)
