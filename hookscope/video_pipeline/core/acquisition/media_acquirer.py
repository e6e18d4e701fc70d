"""
Fetches the source video into the run's working directory.

Remote references go through yt-dlp (platform pages such as TikTok or
YouTube) or a plain streaming HTTP download (direct media links). Uploads
are byte-copied. No retries happen here: a failed fetch surfaces as an
AcquisitionError immediately.
"""

import asyncio
import ipaddress
import os
import shutil
from dataclasses import dataclass
from typing import List, Optional, Union
from urllib.parse import urlparse

import aiofiles
import aiohttp
import yt_dlp
from loguru import logger

from hookscope.exceptions import AcquisitionError, ValidationException

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DIRECT_MEDIA_EXTENSIONS = (".mp4", ".mov", ".m4v", ".webm", ".mkv")
_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0", "::1"}
_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class SourceReference:
    """Either a remote URL or a local upload (a path or raw bytes)."""

    url: Optional[str] = None
    upload_path: Optional[str] = None
    upload_bytes: Optional[bytes] = None
    filename: Optional[str] = None

    @classmethod
    def from_url(cls, url: str) -> "SourceReference":
        if not url or not url.strip():
            raise AcquisitionError("Source URL is empty", error_code="INVALID_URL")
        return cls(url=url.strip())

    @classmethod
    def from_upload(cls, data: Union[str, bytes], filename: Optional[str] = None) -> "SourceReference":
        if isinstance(data, (bytes, bytearray)):
            if not data:
                raise ValidationException("Uploaded file is empty", error_code="EMPTY_UPLOAD")
            return cls(upload_bytes=bytes(data), filename=filename or "upload.mp4")
        return cls(upload_path=str(data), filename=filename or os.path.basename(str(data)))

    @property
    def is_remote(self) -> bool:
        return self.url is not None

    def describe(self) -> str:
        if self.is_remote:
            return self.url
        return f"upload:{self.filename}"


class MediaAcquirer:
    def __init__(
        self,
        max_download_mb: int = 500,
        timeout_seconds: int = 120,
        allowed_domains: Optional[List[str]] = None,
    ):
        self.max_file_size = max_download_mb * 1024 * 1024
        self.timeout = timeout_seconds
        self.allowed_domains = allowed_domains or []

    def validate_url(self, url: str) -> None:
        """
        Raises:
            AcquisitionError: On a malformed URL, a disallowed domain or a local-network host
        """
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            raise AcquisitionError(f"Invalid URL scheme: {parsed.scheme or '<none>'}", error_code="INVALID_URL")
        host = (parsed.hostname or "").lower()
        if not host:
            raise AcquisitionError(f"URL has no host: {url}", error_code="INVALID_URL")

        if self.allowed_domains and not any(
            host == domain or host.endswith("." + domain) for domain in self.allowed_domains
        ):
            raise AcquisitionError(f"Domain {host} not in allowed list", error_code="DOMAIN_NOT_ALLOWED")

        if host in _LOCAL_HOSTS or _is_private_address(host):
            raise AcquisitionError("Local network access not allowed", error_code="LOCAL_NETWORK")

    @staticmethod
    def is_direct_media(url: str) -> bool:
        return urlparse(url).path.lower().endswith(DIRECT_MEDIA_EXTENSIONS)

    async def acquire(self, source: SourceReference, destination: str) -> str:
        """
        Produce exactly one local video file at destination.

        Args:
            source: Where the video comes from
            destination: Path of the file to create inside the working directory

        Returns:
            str: destination

        Raises:
            AcquisitionError: If the source cannot be fetched or copied
        """
        logger.info(f"Acquiring {source.describe()} -> {destination}")
        try:
            if source.is_remote:
                self.validate_url(source.url)
                if self.is_direct_media(source.url):
                    await self._download_http(source.url, destination)
                else:
                    await self._download_platform(source.url, destination)
            else:
                await self._copy_upload(source, destination)
        except AcquisitionError:
            _discard(destination)
            raise
        except Exception as e:
            _discard(destination)
            raise AcquisitionError(f"Video acquisition failed: {e}", details={"source": source.describe()}) from e

        if not os.path.exists(destination) or os.path.getsize(destination) == 0:
            _discard(destination)
            raise AcquisitionError(f"No video was obtained from {source.describe()}", error_code="EMPTY_DOWNLOAD")

        size = os.path.getsize(destination)
        if size > self.max_file_size:
            _discard(destination)
            raise AcquisitionError(f"File size {size} exceeds limit {self.max_file_size}", error_code="TOO_LARGE")

        logger.info(f"Acquired {size / (1024 * 1024):.2f} MB from {source.describe()}")
        return destination

    async def _download_platform(self, url: str, destination: str) -> None:
        ydl_opts = {
            "format": "best[ext=mp4]/best",
            "outtmpl": destination,
            "http_headers": {"User-Agent": DESKTOP_USER_AGENT},
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
            "socket_timeout": self.timeout,
            "max_filesize": self.max_file_size,
            "retries": 0,
        }
        try:
            await asyncio.to_thread(self._run_ytdlp, url, ydl_opts)
        except yt_dlp.utils.DownloadError as e:
            raise AcquisitionError(f"Download failed for {url}: {e}", error_code="DOWNLOAD_FAILED") from e

    @staticmethod
    def _run_ytdlp(url: str, opts: dict) -> None:
        with yt_dlp.YoutubeDL(opts) as ydl:
            ydl.download([url])

    async def _download_http(self, url: str, destination: str) -> None:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout, headers={"User-Agent": DESKTOP_USER_AGENT}) as session:
            async with session.get(url) as response:
                response.raise_for_status()

                content_length = response.headers.get("Content-Length")
                if content_length and int(content_length) > self.max_file_size:
                    raise AcquisitionError(f"File size {content_length} exceeds limit", error_code="TOO_LARGE")

                downloaded = 0
                async with aiofiles.open(destination, "wb") as f:
                    async for chunk in response.content.iter_chunked(_CHUNK_SIZE):
                        downloaded += len(chunk)
                        if downloaded > self.max_file_size:
                            raise AcquisitionError("Download exceeds size limit", error_code="TOO_LARGE")
                        await f.write(chunk)

    async def _copy_upload(self, source: SourceReference, destination: str) -> None:
        if source.upload_bytes is not None:
            async with aiofiles.open(destination, "wb") as f:
                await f.write(source.upload_bytes)
            return
        if not source.upload_path or not os.path.isfile(source.upload_path):
            raise AcquisitionError(f"Uploaded file not found: {source.upload_path}", error_code="UPLOAD_MISSING")
        await asyncio.to_thread(shutil.copyfile, source.upload_path, destination)


def _is_private_address(host: str) -> bool:
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return address.is_private or address.is_loopback or address.is_link_local


def _discard(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)
