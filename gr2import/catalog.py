#!/usr/bin/env python3

# Turns the camera's object listing (GET /_gr/objs) into Photo records:
#
# { "dirs": [ { "name": "100RICOH",
#               "files": [ { "n": "R0001234.JPG", "d": "2025-06-07T09:32:40" } ] } ] }

import json

from dataclasses import dataclass

from gr2import.errors import MalformedCatalog
from gr2import.logger import logger
from gr2import.sanitize import DOT_SEGMENTS, MAX_FILENAME, sanitize, is_bounded_name
from gr2import.util import date_folder


@dataclass(frozen=True)
class Photo:
    name: str
    tag: str
    date: str


def parse_catalog(document):
    """
    Parse the listing into Photos, in directory order then file order.

    Directories without a string 'name' or an array 'files' are skipped whole.
    Files whose 'n' is missing, sanitizes to nothing or to '.'/'..' are dropped.
    A missing or unreadable 'd' gives today's date instead of failing.
    Raises MalformedCatalog if the document is not JSON or has no 'dirs' array.
    """
    try:
        data = json.loads(document)
    except (TypeError, ValueError) as e:
        raise MalformedCatalog(f"Error parsing JSON: {e}") from e
    except RecursionError as e:
        raise MalformedCatalog("Error parsing JSON: document nested too deeply") from e

    dirs = data.get("dirs") if isinstance(data, dict) else None
    if not isinstance(dirs, list):
        raise MalformedCatalog("No 'dirs' array found in JSON")

    photos = []
    for directory in dirs:
        if not isinstance(directory, dict):
            continue

        raw_tag = directory.get("name")
        if not isinstance(raw_tag, str):
            logger.debug(f"Skipping directory without a name: {directory!r:.80}")
            continue

        files = directory.get("files")
        if not isinstance(files, list):
            logger.debug(f"Skipping directory {raw_tag!r}: no 'files' array")
            continue

        tag = sanitize(raw_tag)
        if len(tag) >= MAX_FILENAME:
            logger.warning(f"Skipping directory with over-long name ({len(tag)} chars)")
            continue
        if tag in DOT_SEGMENTS:
            logger.warning(f"Skipping directory {raw_tag!r}: not a usable tag")
            continue

        for entry in files:
            photo = _photo_from_entry(entry, tag)
            if photo is not None:
                photos.append(photo)

    return photos


def _photo_from_entry(entry, tag):
    if not isinstance(entry, dict):
        return None

    raw_name = entry.get("n")
    if not isinstance(raw_name, str):
        raw_name = ""

    name = sanitize(raw_name)
    if not is_bounded_name(name):
        if raw_name:
            logger.warning(f"Dropping file {raw_name!r:.80} in {tag}: unusable name after sanitization")
        else:
            logger.debug(f"Dropping unnamed file entry in {tag}")
        return None

    return Photo(name=name, tag=tag, date=date_folder(entry.get("d")))
