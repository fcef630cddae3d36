"""
Network downloads with progress tracking.

This module fetches the Nix installer script and the declarative environment
configuration file:
- HTTP/HTTPS downloads with TLS verification and redirects
- Progress reporting (bytes, percentage, speed)
- Timeout handling
- Atomic replacement of the destination (a failed download never clobbers
  an existing file)

Downloads are attempted once; failures surface as DownloadError.
"""

import logging
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from devenvkit.core.exceptions import DevEnvKitError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second

    def __str__(self) -> str:
        return format_progress(self)


class DownloadError(DevEnvKitError):
    """Exception raised when download fails."""

    pass


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
) -> Path:
    """
    Download file from URL to destination.

    The body is streamed into a temporary file next to the destination and
    renamed into place only after the transfer completed.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or returns an error status
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file(
        ...     "https://example.com/flake.nix", Path("project/flake.nix")
        ... )
        PosixPath('project/flake.nix')
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Downloading {url} -> {destination}")

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".part"
    )
    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "wb") as f:
            _stream_to(url, f, progress_callback, timeout)
        temp_path.replace(destination)
    except RequestException as e:
        raise DownloadError(f"Failed to download {url}: {e}") from e
    finally:
        # Still present only if the transfer or the replace did not finish
        temp_path.unlink(missing_ok=True)

    logger.debug(f"Download complete: {destination}")
    return destination


def _stream_to(
    url: str,
    f,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    timeout: int,
) -> int:
    """
    Stream a response body into an open binary file.

    Returns:
        Number of bytes written

    Raises:
        RequestException: If the HTTP request fails
    """
    with requests.get(
        url, stream=True, timeout=timeout, allow_redirects=True
    ) as response:
        response.raise_for_status()

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        downloaded = 0
        reported = -1
        start_time = time.time()
        last_progress_time = start_time

        def report(current_time: float) -> None:
            elapsed = current_time - start_time
            progress_callback(
                DownloadProgress(
                    bytes_downloaded=downloaded,
                    total_bytes=total_size if total_size > 0 else downloaded,
                    percentage=(downloaded / total_size * 100)
                    if total_size > 0
                    else 0,
                    speed_bps=downloaded / elapsed if elapsed > 0 else 0,
                )
            )

        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            # Report progress at most every 0.5s
            current_time = time.time()
            if progress_callback and current_time - last_progress_time >= 0.5:
                report(current_time)
                reported = downloaded
                last_progress_time = current_time

        # Always once at the end
        if progress_callback and reported != downloaded:
            report(time.time())

    return downloaded


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(51200, 102400, 50.0, 10240)
        >>> print(format_progress(progress))
        50.0/100.0 KB (50.0%) at 10.0 KB/s
    """
    kb_downloaded = progress.bytes_downloaded / 1024
    kb_total = progress.total_bytes / 1024
    speed_kbps = progress.speed_bps / 1024

    if progress.total_bytes > 0 and progress.percentage > 0:
        return (
            f"{kb_downloaded:.1f}/{kb_total:.1f} KB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_kbps:.1f} KB/s"
        )
    return f"{kb_downloaded:.1f} KB at {speed_kbps:.1f} KB/s"
