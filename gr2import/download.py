#!/usr/bin/env python3

# Download one photo into {base_path}/{date}/{name}.
# A file already at the destination is never requested again, and a
# download that fails half-way never leaves a truncated file behind.

import os
import enum

from dataclasses import dataclass
from typing import Callable, Optional

import requests

from gr2import.catalog import Photo
from gr2import.errors import InvalidPath, DirectoryCreateFailed, DownloadTransportError
from gr2import.logger import logger
from gr2import.sanitize import validate_path

DOWNLOAD_TIMEOUT = 60
CHUNK_SIZE = 8192

Progress = Callable[[int, Optional[int]], None]


class DownloadResult(enum.Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DownloadOutcome:
    result: DownloadResult
    path: str
    error: Optional[DownloadTransportError] = None


def photo_url(base_url: str, photo: Photo) -> str:
    # tag and name are already sanitized; the camera expects them unencoded
    return f"{base_url.rstrip('/')}/v1/photos/{photo.tag}/{photo.name}"


def destination_for(photo: Photo, base_path: str) -> str:
    """
    Validate and create {base_path}/{date}, then return the file path inside it.
    Raises InvalidPath or DirectoryCreateFailed.
    """
    if not validate_path(base_path):
        raise InvalidPath(f"Invalid base path: {base_path!r}")

    directory = os.path.join(base_path, photo.date)
    if not validate_path(directory):
        raise InvalidPath(f"Invalid directory path: {directory!r}")

    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateFailed(f"Cannot create directory {directory}: {e}") from e

    file_path = os.path.join(directory, photo.name)
    if not validate_path(file_path):
        raise InvalidPath(f"Invalid file path: {file_path!r}")
    return file_path


def download_one(base_url: str, photo: Photo, base_path: str, session=None,
                 progress: Optional[Progress] = None,
                 timeout: float = DOWNLOAD_TIMEOUT) -> DownloadOutcome:
    file_path = destination_for(photo, base_path)

    if os.path.exists(file_path):
        logger.info(f"File already exists, skipping: {file_path}")
        return DownloadOutcome(DownloadResult.SKIPPED, file_path)

    url = photo_url(base_url, photo)
    http = session if session is not None else requests
    logger.debug(f"GET {url} -> {file_path}")

    try:
        _stream_to_file(http, url, file_path, progress, timeout)
    except (requests.RequestException, OSError) as e:
        _remove_partial(file_path)
        error = DownloadTransportError(f"Download failed for {photo.name}: {e}")
        error.__cause__ = e
        logger.error(str(error))
        return DownloadOutcome(DownloadResult.FAILED, file_path, error)
    except BaseException:
        _remove_partial(file_path)
        raise

    logger.info(f"Completed: {file_path}")
    return DownloadOutcome(DownloadResult.SUCCESS, file_path)


def _stream_to_file(http, url, file_path, progress, timeout):
    response = http.get(url, stream=True, timeout=timeout, allow_redirects=True)
    try:
        response.raise_for_status()
        total = _content_length(response)

        received = 0
        with open(file_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                received += len(chunk)
                if progress is not None:
                    progress(received, total)
    finally:
        response.close()


def _content_length(response):
    try:
        total = int(response.headers.get("Content-Length", ""))
    except (TypeError, ValueError):
        return None
    return total if total > 0 else None


def _remove_partial(file_path):
    try:
        os.remove(file_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Could not remove incomplete file {file_path}: {e}")
