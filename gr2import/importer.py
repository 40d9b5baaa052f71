#!/usr/bin/env python3

from dataclasses import dataclass

from gr2import.download import DownloadResult
from gr2import.errors import PhotoError
from gr2import.filters import select_photos
from gr2import.logger import logger


@dataclass
class ImportSummary:
    found: int = 0
    selected: int = 0
    downloaded: int = 0
    skipped: int = 0
    failed: int = 0


def import_photos(camera, base_path, format_spec="all", filename=None, progress_factory=None):
    """
    List the camera, pick the wanted photos and download them one by one.
    Catalog errors propagate; a failing photo is counted and the loop goes on.
    """
    summary = ImportSummary()

    photos = camera.list_photos()
    summary.found = len(photos)

    selected = select_photos(photos, format_spec, filename)
    summary.selected = len(selected)
    logger.info(f"Found {summary.found} photos on the camera, {summary.selected} matching criteria")

    for number, photo in enumerate(selected, start=1):
        logger.info(f"Photo {number}: {photo.name}, date={photo.date}", extra={"plain": True})

        progress = progress_factory(photo) if progress_factory else None
        try:
            outcome = camera.download(photo, base_path, progress=progress)
        except PhotoError as e:
            logger.error(f"Skipping {photo.name}: {e}")
            summary.failed += 1
            continue
        finally:
            if hasattr(progress, "close"):
                progress.close()

        if outcome.result is DownloadResult.SUCCESS:
            summary.downloaded += 1
        elif outcome.result is DownloadResult.SKIPPED:
            summary.skipped += 1
        else:
            summary.failed += 1

    return summary
