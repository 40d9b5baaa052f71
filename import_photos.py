#!/usr/bin/env python3

import os
import sys
import argparse

from dataclasses import dataclass
from typing import Optional

from gr2import.camera import RicohCamera
from gr2import.config import Config
from gr2import.errors import ArgumentError, CatalogFetchError, MalformedCatalog
from gr2import.filters import FORMATS
from gr2import.importer import import_photos
from gr2import.logger import logger, enable_file_logging
from gr2import.sanitize import sanitize, is_bounded_name, validate_path
from gr2import.util import ProgressBar

# Downloads photos from a Ricoh GR II over its Wi-Fi API.
# Connect the computer to the camera's Wi-Fi network first, then run this script.
# Photos land in <path>/<YYYY-MM-DD>/<filename>; files already there are skipped.

EXAMPLES = """\
Examples:
  %(prog)s                    Download all photos
  %(prog)s -f jpg             Download only JPG files
  %(prog)s -f dng             Download only DNG files
  %(prog)s -F R0001234.JPG    Download specific file
  %(prog)s -p /media/usb      Download to USB drive
"""


@dataclass(frozen=True)
class CliOptions:
    format: str = "all"
    filename: Optional[str] = None
    target_path: Optional[str] = None
    config_path: str = "config.json"
    help: bool = False


class _Parser(argparse.ArgumentParser):

    def error(self, message):
        raise ArgumentError(message)


def build_parser(prog=None):
    parser = _Parser(
        prog=prog,
        description="Download photos from Ricoh GR II camera",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true",
                        help="Show this help message")
    parser.add_argument("-f", "--format", default="all", choices=FORMATS,
                        help="File format to download (dng, jpg, all) [default: all]")
    parser.add_argument("-F", "--file", dest="filename", metavar="FILENAME",
                        help="Download only specified file")
    parser.add_argument("-p", "--path", dest="target_path", metavar="PATH",
                        help="Alternative target path [default: $HOME/Pictures/RicohGRII]")
    parser.add_argument("-c", "--config", dest="config_path", default="config.json",
                        help="Configuration file [default: config.json]")
    return parser


def wants_help(argv):
    """True if -h/--help is anywhere on the command line; it wins over bad values elsewhere."""
    help_parser = _Parser(add_help=False)
    help_parser.add_argument("-h", "--help", action="store_true")
    known, _ = help_parser.parse_known_args(argv)
    return known.help


def parse_arguments(argv, parser=None):
    if wants_help(argv):
        return CliOptions(help=True)

    parser = parser or build_parser()
    args = parser.parse_args(argv)

    filename = None
    if args.filename is not None:
        filename = sanitize(args.filename)
        if not is_bounded_name(filename):
            raise ArgumentError("Invalid filename after sanitization")

    if args.target_path is not None and not validate_path(args.target_path):
        raise ArgumentError(f"Invalid path '{args.target_path}'")

    return CliOptions(
        format=args.format,
        filename=filename,
        target_path=args.target_path,
        config_path=args.config_path,
    )


def resolve_base_path(options, config):
    if options.target_path:
        return options.target_path

    base_path = config.default_target_path()
    if base_path is None:
        raise ArgumentError("Cannot determine the home directory")
    if not validate_path(base_path):
        raise ArgumentError(f"Invalid default path '{base_path}'")
    return base_path


def main(argv=None):
    parser = build_parser()
    try:
        options = parse_arguments(argv, parser)
    except ArgumentError as e:
        logger.error(f"Error: {e}")
        parser.print_usage(sys.stderr)
        return 1

    if options.help:
        parser.print_help()
        return 0

    config = Config(options.config_path)
    try:
        enable_file_logging(config.logging_path)
    except OSError as e:
        logger.error(f"Could not open log directory {config.logging_path}: {e}")

    try:
        base_path = resolve_base_path(options, config)
    except ArgumentError as e:
        logger.error(f"Error: {e}")
        return 1

    logger.info(f"Target directory: {base_path}")
    try:
        os.makedirs(base_path, exist_ok=True)
    except OSError as e:
        logger.error(f"Cannot create target directory {base_path}: {e}")
        return 1

    with RicohCamera(config.base_url, config.catalog_timeout, config.download_timeout) as camera:
        try:
            summary = import_photos(camera, base_path, options.format, options.filename,
                                    progress_factory=lambda photo: ProgressBar(photo.name))
        except (CatalogFetchError, MalformedCatalog) as e:
            logger.error(f"Failed to list photos: {e}")
            return 1

    logger.info(f"Download complete. Downloaded {summary.downloaded} photos to {base_path} "
                f"({summary.skipped} already present, {summary.failed} failed)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
