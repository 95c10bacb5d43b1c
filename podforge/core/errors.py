"""
Error hierarchy — every failure podforge surfaces to its caller.

All errors derive from ``PodforgeError`` so entry points can catch one
type and print the whole ``__cause__`` chain.  Absence checks that are
legitimately empty (no hooks directory, no override layer) never raise.
"""

from __future__ import annotations

from pathlib import Path


class PodforgeError(Exception):
    """Base class for all podforge errors."""


class ConfigError(PodforgeError):
    """Raised when settings, pod metadata or default tags are invalid."""


class ProjectNotFound(PodforgeError):
    """No project marker was found walking upward from a directory."""

    def __init__(self, start_dir: Path):
        self.start_dir = start_dir
        super().__init__(
            f"Could not find a 'pods' directory in {start_dir} or any parent"
        )


class DirectoryReadFailure(PodforgeError):
    """A directory could not be listed."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Could not read directory {path}")


class FileReadFailure(PodforgeError):
    """A file could not be read or parsed."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        msg = f"Could not read file {path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class NameResolutionFailure(PodforgeError):
    """A named pod, service, override or source does not exist."""

    def __init__(self, name: str, kind: str = "pod or service", detail: str = ""):
        self.name = name
        self.kind = kind
        msg = f"Cannot find {kind} '{name}'"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class AliasDerivationFailure(PodforgeError):
    """A source reference yields no usable alias."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Can't get repo name from {reference}")


class DestinationExists(PodforgeError):
    """An export destination is already present."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"The directory {path} already exists")


class TransformFailure(PodforgeError):
    """A transform plugin could not be applied to a pod."""

    def __init__(self, plugin: str, pod: str, reason: str = ""):
        self.plugin = plugin
        self.pod = pod
        msg = f"Plugin '{plugin}' failed while transforming pod '{pod}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class ExternalCommandFailure(PodforgeError):
    """An external command exited non-zero or could not be launched."""

    def __init__(self, command: list[str], returncode: int | None = None, reason: str = ""):
        self.command = command
        self.returncode = returncode
        line = " ".join(command)
        if returncode is not None:
            msg = f"Command '{line}' exited with code {returncode}"
        else:
            msg = f"Could not run '{line}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


def error_chain(err: BaseException) -> list[str]:
    """Messages of ``err`` and every exception it was raised from."""
    messages: list[str] = []
    current: BaseException | None = err
    while current is not None:
        messages.append(str(current) or current.__class__.__name__)
        current = current.__cause__
    return messages
