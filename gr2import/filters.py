#!/usr/bin/env python3

FORMATS = ("dng", "jpg", "all")

_EXTENSIONS = {
    "jpg": ("jpg", "jpeg"),
    "dng": ("dng",),
}


def matches(filename, format_spec):
    if format_spec == "all":
        return True

    _, dot, ext = filename.rpartition(".")
    if not dot:
        return False
    return ext.lower() in _EXTENSIONS.get(format_spec, ())


def select_photos(photos, format_spec="all", filename=None):
    """
    Pick the photos to download. An exact filename wins over the format:
    only the photo with that name (case-sensitive) is kept.
    """
    if filename:
        return [photo for photo in photos if photo.name == filename]
    return [photo for photo in photos if matches(photo.name, format_spec)]
