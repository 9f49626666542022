from http import HTTPStatus


class UploadError(Exception):
    message = "upload failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidUploadKey(UploadError):
    message = "invalid upload key"


class FailPostFile(UploadError):
    message = "failed to get file"


class RandomNameError(UploadError):
    message = "failed to generate random filename"


class OutputFileError(UploadError):
    message = "error opening output file"


class WriteFileError(UploadError):
    message = "failed to write to output file"

    def __init__(self, bytes_written: int, message: str | None = None):
        super().__init__(message or f"{self.message} after {bytes_written} bytes")
        self.bytes_written = bytes_written


STATUS_CODES: dict[type[UploadError], int] = {
    InvalidUploadKey: 401,
    FailPostFile: 400,
    RandomNameError: 500,
    OutputFileError: 500,
    WriteFileError: 500,
}

# Only these messages are shown to callers; the rest get the HTTP reason phrase.
PUBLIC_ERRORS = frozenset({InvalidUploadKey, FailPostFile})


def status_code(e: Exception) -> int:
    return STATUS_CODES.get(type(e), 500)


def status_text(e: Exception) -> str:
    if type(e) in PUBLIC_ERRORS:
        return str(e)
    return HTTPStatus(status_code(e)).phrase
