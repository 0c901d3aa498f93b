# sitecms/application/exceptions.py
class CMSError(Exception):
    """Base for failures surfaced to the HTTP boundary."""

    status_code = 500
    default_message = "Request failed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class InvalidSection(CMSError):
    status_code = 400
    default_message = "Invalid content section"


class VersionNotFound(CMSError):
    status_code = 404
    default_message = "Version not found"


class SnapshotFailed(CMSError):
    """Copying the current document into a version snapshot failed."""

    default_message = "Failed to copy content to version file"


class WriteFailed(CMSError):
    """The final overwrite of a current document failed."""

    default_message = "Failed to write content"


class ImageNotFound(CMSError):
    status_code = 404
    default_message = "File not found"


class InvalidImageKey(CMSError):
    status_code = 400
    default_message = "Invalid image key - must be in images folder"


class CorruptVersion(CMSError):
    """A snapshot blob exists but does not hold a JSON document."""

    default_message = "Version snapshot is not valid JSON"
