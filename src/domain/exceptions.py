class DirectoryException(Exception):
    """Base exception for all project directory errors."""
    pass

class DataSourceUnavailableException(DirectoryException):
    """Raised when the directory API cannot be reached or answers with a server error."""
    def __init__(self, message: str = "Project directory API is unavailable.", status: int = None):
        self.status = status
        super().__init__(message if status is None else f"{message} (HTTP {status})")

class SubmissionRejectedException(DirectoryException):
    """Raised when a repository submission is refused by the API or fails local validation."""
    def __init__(self, message: str = "Repository submission was rejected.", status: int = None):
        self.message = message
        self.status = status
        super().__init__(message)

class FavoriteStoreException(DirectoryException):
    """Raised when the favorite store cannot be read or written."""
    pass
