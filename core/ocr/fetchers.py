# Path: core/ocr/fetchers.py
# Purpose: Provide pluggable ways of fetching remote model assets as bytes.
# Layer: core/ocr.
# Details: HttpFetcher streams with requests and a tqdm progress bar; CommandFetcher shells out to a download tool.

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional, Protocol, Sequence

import requests
from tqdm import tqdm

from core.errors import DownloadError

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Anything able to turn a URL into the bytes stored at it."""

    def fetch(self, url: str) -> bytes:
        """Return the content at ``url`` or raise DownloadError."""


class HttpFetcher:
    """Download assets over HTTP(S) in a single attempt."""

    def __init__(self, timeout: float = 120.0, chunk_size: int = 1 << 16, show_progress: bool = True) -> None:
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.show_progress = show_progress

    def fetch(self, url: str) -> bytes:
        chunks: List[bytes] = []
        try:
            with requests.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                total = int(response.headers.get("content-length") or 0) or None
                name = url.rsplit("/", 1)[-1]
                with tqdm(total=total, unit="B", unit_scale=True, desc=name, disable=not self.show_progress) as bar:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        chunks.append(chunk)
                        bar.update(len(chunk))
        except requests.RequestException as exc:
            raise DownloadError(f"Failed to download {url}: {exc}") from exc
        return b"".join(chunks)


class CommandFetcher:
    """Fetch assets by running an external command that writes the content to stdout.

    ``command`` is an argument list in which ``{url}`` is replaced by the asset URL,
    e.g. ``["curl", "-fsSL", "{url}"]``.
    """

    def __init__(self, command: Sequence[str], timeout: Optional[float] = None) -> None:
        self.command = list(command)
        self.timeout = timeout

    def fetch(self, url: str) -> bytes:
        args = [part.replace("{url}", url) for part in self.command]
        try:
            proc = subprocess.run(args, check=False, capture_output=True, timeout=self.timeout)
        except (FileNotFoundError, PermissionError) as exc:
            raise DownloadError(f"Download command {args[0]!r} could not be started: {exc}") from exc
        except subprocess.TimeoutExpired as exc:
            raise DownloadError(f"Download command timed out for {url}") from exc

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            raise DownloadError(f"Download command exited with status {proc.returncode} for {url}: {stderr}")
        return proc.stdout
