from univerify.api.exceptions import FileValidationError
from univerify.config.settings import Settings
from univerify.upload.models import DocumentFile, UploadPolicy

MB = 1024 * 1024


def policy_from_settings(settings: Settings, max_size_bytes: int | None = None) -> UploadPolicy:
    return UploadPolicy(
        max_size_bytes=max_size_bytes if max_size_bytes is not None else settings.upload_max_size_bytes,
        allowed_types=frozenset(settings.upload_allowed_types),
    )


def format_size_limit(max_size_bytes: int) -> str:
    """Render a size limit in megabytes, or in bytes below one megabyte."""
    if max_size_bytes < MB:
        return f"{max_size_bytes} bytes"
    return f"{max_size_bytes / MB:.2f}".rstrip("0").rstrip(".") + "MB"


def validate_file(file: DocumentFile, policy: UploadPolicy) -> None:
    """Check a file against the upload policy.

    Raises:
        FileValidationError: if the file is too large or of a disallowed type.
    """
    if file.size > policy.max_size_bytes:
        raise FileValidationError(
            f"File size exceeds {format_size_limit(policy.max_size_bytes)} limit"
        )
    if file.content_type not in policy.allowed_types:
        raise FileValidationError(f"File type not supported: {file.content_type}")
