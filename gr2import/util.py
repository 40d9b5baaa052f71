#!/usr/bin/env python3

import re
import datetime

from tqdm import tqdm

# This is a collection of small helpers shared by the catalog and the downloader

# The camera writes "2025-06-07T09:32:40"; only the date part is required
_DATE_PREFIX = re.compile(r"^\s*(\d{1,4})-(\d{1,2})-(\d{1,2})")


def local_today():
    return datetime.date.today().strftime("%Y-%m-%d")


def date_folder(timestamp):
    """
    Turn a camera timestamp into a 'YYYY-MM-DD' folder name.
    Anything that does not carry a valid year-month-day falls back to today.
    """
    if not isinstance(timestamp, str):
        return local_today()

    match = _DATE_PREFIX.match(timestamp)
    if not match:
        return local_today()

    try:
        day = datetime.date(*(int(part) for part in match.groups()))
    except ValueError:
        return local_today()
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


class ProgressBar:
    """
    Console progress for one file. Called with (bytes_received, total_bytes)
    after every chunk; total_bytes is None when the camera sends no length.
    """

    def __init__(self, filename, file=None):
        self.filename = filename
        self.file = file
        self._bar = None
        self._seen = 0

    def __call__(self, received, total):
        if self._bar is None:
            self._bar = tqdm(total=total, desc=self.filename, unit="B",
                             unit_scale=True, unit_divisor=1024,
                             leave=True, file=self.file)
        self._bar.update(received - self._seen)
        self._seen = received

    def close(self):
        if self._bar is not None:
            self._bar.close()
            self._bar = None
