#!/usr/bin/env python3

import os
import re
import time
import logging
import logging.handlers


# Daily handler that names the active file after the current day
class DailyNamedFileHandler(logging.handlers.TimedRotatingFileHandler):
    """
    A TimedRotatingFileHandler whose active file carries today's date,
    e.g. 'rgr2import_2025_06_07.log'. At midnight the old file is rotated
    and logging moves on to the new day's file.
    """

    def __init__(self, directory, prefix="rgr2import", date_format="%Y_%m_%d",
                 when="midnight", interval=1, backupCount=0, encoding="utf-8",
                 delay=False, utc=False):
        self.directory = directory
        self.prefix = prefix
        self.date_format = date_format

        filename = self._current_filename()
        super().__init__(
            filename=filename,
            when=when,
            interval=interval,
            backupCount=backupCount,
            encoding=encoding,
            delay=delay,
            utc=utc,
        )

        self.suffix = date_format
        self.extMatch = re.compile(r"^\d{4}_\d{2}_\d{2}$")

    def _current_filename(self):
        datestr = time.strftime(self.date_format)
        return os.path.join(self.directory, f"{self.prefix}_{datestr}.log")

    def doRollover(self):
        super().doRollover()

        self.baseFilename = os.path.abspath(self._current_filename())
        if not self.delay:
            self.stream = self._open()


class PlainFormatter(logging.Formatter):
    """Prints the bare message for records logged with extra={"plain": True}."""

    def format(self, record):
        if getattr(record, "plain", False):
            return record.getMessage()
        return super().format(record)


normal_format_str = "%(asctime)s - %(levelname)s - %(message)s"
plain_formatter = PlainFormatter(normal_format_str)

logger = logging.getLogger("rgr2import")
logger.setLevel(logging.DEBUG)
logger.propagate = False

console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(plain_formatter)
logger.addHandler(console_handler)


def enable_file_logging(log_dir):
    """Attach a daily log file under log_dir. Returns the handler, or None if log_dir is empty."""
    if not log_dir:
        return None

    for handler in logger.handlers:
        if isinstance(handler, DailyNamedFileHandler) and handler.directory == log_dir:
            return handler

    os.makedirs(log_dir, exist_ok=True)
    file_handler = DailyNamedFileHandler(directory=log_dir)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(plain_formatter)
    logger.addHandler(file_handler)
    return file_handler
