"""Exceptions raised while bundling."""

import pathlib


class BundleError(RuntimeError):
    """Raised when bundling fails."""


class ConfigurationError(BundleError):
    """Raised when a bundle request cannot be acted on (e.g. no outputs requested)."""


class InputReadError(BundleError):
    """Raised when a required input file cannot be read.

    :ivar path: The offending input path.
    """

    def __init__(self, path: pathlib.Path, message: str) -> None:
        super().__init__(message)
        self.path: pathlib.Path = path


class OutputWriteError(BundleError):
    """Raised when an output file cannot be created, written, or marked executable.

    :ivar path: The offending output path.
    """

    def __init__(self, path: pathlib.Path, message: str) -> None:
        super().__init__(message)
        self.path: pathlib.Path = path


class BundleFailedError(BundleError):
    """Raised after every requested artifact was attempted and at least one failed.

    :ivar failures: ``(artifact kind, output path, cause)`` for each failed artifact.
    """

    def __init__(self, failures: list[tuple[str, pathlib.Path, BaseException]]) -> None:
        lines: list[str] = [f"{len(failures)} bundle output(s) failed:"]
        for kind, path, exc in failures:
            lines.append(f"  {kind} {path}: {exc}")
        super().__init__("\n".join(lines))
        self.failures: list[tuple[str, pathlib.Path, BaseException]] = failures
