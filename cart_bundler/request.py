"""Bundle request model.

A :class:`~BundleRequest` names every output to produce plus the metadata
shared by all of them. It is built by the CLI (or any other caller) and then
handed to :func:`cart_bundler.bundler.bundle`.
"""

from dataclasses import dataclass, field
import enum
import pathlib

from cart_bundler.errors import ConfigurationError

DEFAULT_TITLE: str = "WASM-4 Game"


class Platform(enum.Enum):
    """Native platforms with a pre-built runtime image."""

    WINDOWS = "windows"
    MAC = "mac"
    LINUX = "linux"

    @property
    def runtime_filename(self) -> str:
        """File name of the runtime image under the ``natives/`` assets directory."""

        if self is Platform.WINDOWS:
            return "wasm4-windows.exe"
        return f"wasm4-{self.value}"


@dataclass(frozen=True, slots=True)
class IconFile:
    """Icon read from a local file and embedded as a data URL.

    :ivar path: Icon file path.
    """

    path: pathlib.Path


@dataclass(frozen=True, slots=True)
class IconUrl:
    """Icon referenced by URL, embedded verbatim.

    :ivar url: Icon URL.
    """

    url: str


IconSource = IconFile | IconUrl


@dataclass(frozen=True, slots=True)
class BundleOptions:
    """Metadata shared by every output of one request.

    :ivar title: Page title and native window title.
    :ivar description: Optional page description.
    :ivar icon: Optional icon source.
    :ivar timestamp: Embed a creation timestamp in the HTML page.
    """

    title: str = DEFAULT_TITLE
    description: str | None = None
    icon: IconSource | None = None
    timestamp: bool = False


@dataclass(frozen=True, slots=True)
class BundleRequest:
    """Every output requested for one cartridge.

    :ivar html: Output path of the HTML page, if requested.
    :ivar natives: Output path per requested native platform.
    :ivar options: Shared metadata.
    """

    html: pathlib.Path | None = None
    natives: dict[Platform, pathlib.Path] = field(default_factory=dict)
    options: BundleOptions = field(default_factory=BundleOptions)

    def validate(self) -> None:
        """Check that the request names at least one output and its text is encodable.

        :raises ConfigurationError: If no output was requested, or the title or
            description cannot be encoded as UTF-8 (e.g. undecodable argv bytes).
        """

        if self.html is None and len(self.natives) == 0:
            raise ConfigurationError(
                "You must specify one or more bundle outputs (--html, --windows, --mac, --linux)."
            )

        _check_utf8("title", self.options.title)
        if self.options.description is not None:
            _check_utf8("description", self.options.description)


def _check_utf8(field_name: str, value: str) -> None:
    """Reject text that cannot be written as UTF-8.

    :param field_name: Option name used in the error message.
    :param value: Text to check.
    :raises ConfigurationError: If ``value`` contains lone surrogates.
    """

    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ConfigurationError(
            f"The {field_name} is not valid UTF-8 text (offending character at index {exc.start})."
        ) from exc


@dataclass(frozen=True, slots=True)
class Artifact:
    """A bundle output that was fully written.

    :ivar kind: ``html`` or the native platform name.
    :ivar path: Output path.
    :ivar size: Size in bytes.
    """

    kind: str
    path: pathlib.Path
    size: int
