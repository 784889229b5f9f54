"""Exception types raised by viewgen.

Every error names the thing it pertains to (reference, template,
destination path, config file) so messages are actionable on their own.
"""

from __future__ import annotations

import errno


class ViewgenError(Exception):
    """Base class for all viewgen errors."""


class DocumentLoadError(ViewgenError):
    def __init__(self, source: str, cause: Exception | str) -> None:
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to load OpenAPI document from {source}: {cause}")


class ConfigError(ViewgenError):
    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Invalid config {path}: {message}")


class UnresolvedReferenceError(ViewgenError):
    """A $ref points at a schema name that is not in the registry."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"Unresolved schema reference: {ref}")


class MissingTemplateError(ViewgenError):
    def __init__(
        self,
        artifact_type: str,
        template_path: str | None = None,
        destination: str | None = None,
    ) -> None:
        self.artifact_type = artifact_type
        self.template_path = template_path
        self.destination = destination
        if template_path is None:
            msg = f"No template configured for type {artifact_type!r}"
        else:
            msg = f"Template for type {artifact_type!r} does not exist: {template_path}"
        if destination is not None:
            msg = f"Cannot generate {destination}: {msg}"
        super().__init__(msg)


class TemplateReadError(ViewgenError):
    """A configured template exists but could not be read or decoded."""

    def __init__(self, template_path: str, destination: str | None, cause: Exception) -> None:
        self.template_path = template_path
        self.destination = destination
        self.cause = cause
        msg = f"Failed to read template {template_path}: {cause}"
        if destination is not None:
            msg = f"Cannot generate {destination}: {msg}"
        super().__init__(msg)


class RenderError(ViewgenError):
    def __init__(self, destination: str, cause: Exception) -> None:
        self.destination = destination
        self.cause = cause
        super().__init__(f"Failed to render {destination}: {cause}")


class WriteFailureError(ViewgenError):
    """Filesystem failure while creating directories or writing a file.

    ``kind`` classifies the underlying errno as ``permission-denied``,
    ``path-not-found`` or ``other``.
    """

    def __init__(self, destination: str, cause: OSError) -> None:
        self.destination = destination
        self.cause = cause
        self.kind = _classify(cause)
        super().__init__(f"Failed to write {destination} ({self.kind}): {cause}")


class UserCancelledError(ViewgenError):
    """Batch aborted before any file was written."""

    def __init__(self, conflicts: list[str]) -> None:
        self.conflicts = list(conflicts)
        super().__init__(
            f"Generation cancelled: {len(self.conflicts)} file(s) already exist "
            f"({', '.join(self.conflicts)})"
        )


def _classify(exc: OSError) -> str:
    if exc.errno in (errno.EACCES, errno.EPERM):
        return "permission-denied"
    if exc.errno in (errno.ENOENT, errno.ENOTDIR):
        return "path-not-found"
    return "other"
