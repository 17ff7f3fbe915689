# ABOUTME: Metadata provider that shells out to Calibre's fetch-ebook-metadata tool.
# ABOUTME: Runs the fetcher per ISBN, captures its OPF output and cover, and parses them.

import asyncio
import logging
import tempfile
from pathlib import Path

from bouquineur.config import CalibreConfig
from bouquineur.metadata.opf_parser import OpfDateError, OpfParseError, parse_opf
from bouquineur.metadata.types import BookMetadata

logger = logging.getLogger(__name__)


class CalibreMetadataError(Exception):
    """Base class for failures while fetching metadata with the Calibre tool."""


class LaunchError(CalibreMetadataError):
    """Raised when the fetcher process could not be started."""


class InvalidResponseError(CalibreMetadataError):
    """Raised when the fetcher's output is not valid UTF-8."""


class InvalidXmlResponseError(CalibreMetadataError):
    """Raised when the fetcher's output is not a well-formed XML document."""


class InvalidDateError(CalibreMetadataError):
    """Raised when the fetcher's output contains an unparseable date."""


class CoverArtError(CalibreMetadataError):
    """Raised when the temporary cover art file cannot be created or read."""


class FetchTimeoutError(CalibreMetadataError):
    """Raised when the fetcher runs longer than the configured timeout."""


class FetchFailureError(CalibreMetadataError):
    """Raised when the fetcher exits unsuccessfully.

    Keeps the captured output so operators can see what the tool reported.
    """

    def __init__(self, returncode: int | None, stdout: bytes, stderr: bytes) -> None:
        super().__init__(f"Fetcher failed to get the metadata (exit status {returncode})")
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        process.kill()
    await process.wait()


def build_command(fetcher: Path, isbn: str, cover_path: Path) -> list[str]:
    """Build the fetch-ebook-metadata argument list for one ISBN."""
    return [str(fetcher), "--isbn", isbn, "--opf", "--cover", str(cover_path)]


class CalibreProvider:
    """Looks up ISBNs by running the configured Calibre metadata fetcher.

    Each fetch spawns a fresh process and uses its own temporary cover file,
    which is removed before the fetch returns or raises.
    """

    def __init__(self, config: CalibreConfig) -> None:
        self._config = config

    @property
    def name(self) -> str:
        return "calibre"

    async def fetch_metadata(self, isbn: str) -> BookMetadata | None:
        """Fetch metadata for an ISBN (already stripped of separators).

        Returns:
            The parsed metadata, or None if the fetcher reported nothing.

        Raises:
            CalibreMetadataError: One of its subclasses, describing the failure.
        """
        logger.debug("Fetching metadata for isbn '%s'", isbn)

        try:
            with tempfile.NamedTemporaryFile(
                prefix="bouquineur-", suffix=".jpg", delete=False
            ) as cover_file:
                cover_path = Path(cover_file.name)
        except OSError as exc:
            raise CoverArtError(f"Could not create the cover art file: {exc}") from exc

        # The fetcher may replace or remove the file, so cleanup tolerates its absence
        try:
            stdout, stderr = await self._run(isbn, cover_path)
            try:
                cover_art = cover_path.read_bytes()
            except OSError as exc:
                raise CoverArtError(f"Could not read the cover art: {exc}") from exc
        finally:
            cover_path.unlink(missing_ok=True)

        try:
            document = stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidResponseError("Response is not a valid utf-8 document") from exc

        try:
            return parse_opf(document, cover_art)
        except OpfParseError as exc:
            raise InvalidXmlResponseError(str(exc)) from exc
        except OpfDateError as exc:
            raise InvalidDateError(str(exc)) from exc

    async def _run(self, isbn: str, cover_path: Path) -> tuple[bytes, bytes]:
        command = build_command(self._config.fetcher, isbn, cover_path)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise LaunchError(f"Could not launch metadata fetcher {command[0]}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._config.timeout
            )
        except asyncio.TimeoutError as exc:
            await _kill(process)
            raise FetchTimeoutError(
                f"Metadata fetcher did not finish within {self._config.timeout}s"
            ) from exc
        except BaseException:
            # Cancelled by the caller
            await _kill(process)
            raise

        logger.debug("Stdout:\n%s", stdout.decode("utf-8", errors="replace"))
        logger.debug("Stderr:\n%s", stderr.decode("utf-8", errors="replace"))

        if process.returncode != 0:
            raise FetchFailureError(process.returncode, stdout, stderr)
        return stdout, stderr
