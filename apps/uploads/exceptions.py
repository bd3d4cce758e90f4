"""
Domain exceptions for uploads app.
"""


class UploadServiceError(Exception):
    """Base exception for upload service errors."""
    pass


class MissingFileError(UploadServiceError):
    """Raised when the request carries no file."""
    pass


class InvalidFileTypeError(UploadServiceError):
    """Raised when the file is not an allowed image type."""
    pass


class FileTooLargeError(UploadServiceError):
    """Raised when the file exceeds MAX_UPLOAD_SIZE."""
    pass
