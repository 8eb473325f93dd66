"""Filesystem helpers shared by the composers.

Reads turn ``OSError`` into :class:`~cart_bundler.errors.InputReadError` so the
caller always learns which input was missing. Writes go through a temporary
file in the destination directory and are renamed into place, so a failed
write never leaves a truncated file behind under the final name.
"""

import os
import pathlib
import tempfile

from cart_bundler.errors import InputReadError, OutputWriteError


def _read_umask() -> int:
    """Read the process umask (setting it back immediately)."""

    mask: int = os.umask(0)
    os.umask(mask)
    return mask


# Read once at import; os.umask is process-wide.
_UMASK: int = _read_umask()

DEFAULT_FILE_MODE: int = 0o666 & ~_UMASK


def read_bytes(path: pathlib.Path, *, what: str) -> bytes:
    """Read a required binary input.

    :param path: File to read.
    :param what: Human-readable description used in error messages.
    :returns: File contents.
    :raises InputReadError: If the file cannot be read.
    """

    try:
        return path.read_bytes()
    except OSError as exc:
        raise InputReadError(path, f"Cannot read {what} {path}: {exc.strerror or exc}") from exc


def read_text(path: pathlib.Path, *, what: str) -> str:
    """Read a required UTF-8 text input.

    :param path: File to read.
    :param what: Human-readable description used in error messages.
    :returns: Decoded file contents.
    :raises InputReadError: If the file cannot be read or is not valid UTF-8.
    """

    data: bytes = read_bytes(path, what=what)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InputReadError(path, f"{what} {path} is not valid UTF-8: {exc}") from exc


def write_atomic(path: pathlib.Path, data: bytes, *, mode: int | None = None) -> None:
    """Write ``data`` to ``path`` via a temporary sibling file and an atomic rename.

    Parent directories are created when missing.

    :param path: Destination path.
    :param data: Bytes to write.
    :param mode: Permission bits applied before the rename; defaults to
        ``0o666`` minus the umask, like a plain ``open()``.
    :raises OutputWriteError: If the directory, file, or permission bits cannot be written.
    """

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(
            path, f"Cannot create output directory {path.parent}: {exc.strerror or exc}"
        ) from exc

    if mode is None:
        mode = DEFAULT_FILE_MODE

    tmp_path: pathlib.Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = pathlib.Path(f.name)
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        try:
            os.chmod(tmp_path, mode)
        except OSError as exc:
            raise OutputWriteError(
                path, f"Cannot set permissions {mode:o} on {path}: {exc.strerror or exc}"
            ) from exc

        os.replace(tmp_path, path)
        tmp_path = None
    except OutputWriteError:
        raise
    except OSError as exc:
        raise OutputWriteError(path, f"Cannot write {path}: {exc.strerror or exc}") from exc
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
