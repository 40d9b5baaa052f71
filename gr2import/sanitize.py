#!/usr/bin/env python3

# Names and tags come from the camera's JSON and from the command line.
# Both end up in filesystem paths and URLs, so they are cleaned here first.

import re

MAX_FILENAME = 256
MAX_PATH = 512

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")

# Survive sanitization but still name the current or parent directory
DOT_SEGMENTS = (".", "..")


def sanitize(value):
    """Keep only ASCII letters, digits, '.', '-' and '_'."""
    if not value:
        return ""
    return _UNSAFE.sub("", value)


def is_bounded_name(value):
    return 0 < len(value) < MAX_FILENAME and value not in DOT_SEGMENTS


def validate_path(path):
    if not path:
        return False
    if ".." in path or "//" in path:
        return False
    if "\0" in path:
        return False
    return len(path) < MAX_PATH
