#!/usr/bin/env python3

import os
import json

from gr2import.logger import logger

DEFAULT_BASE_URL = "http://192.168.0.1"
DEFAULT_SUBDIR = os.path.join("Pictures", "RicohGRII")


class Config:
    """
    Settings from 'config.json'. Every key is optional:

    {
        "camera": {"base_url": "http://192.168.0.1", "catalog_timeout": 30, "download_timeout": 60},
        "target_path": "/media/usb/photos",
        "logging_path": "./logs"
    }
    """

    def __init__(self, config_path="config.json"):
        self.config_path = config_path
        self.config = self._read(config_path)

        self.camera_config = self.config.get("camera", {})
        if not isinstance(self.camera_config, dict):
            logger.error(f"Ignoring 'camera' in {config_path}: expected an object")
            self.camera_config = {}

        self.base_url = self._text(self.camera_config, "base_url", DEFAULT_BASE_URL)
        self.catalog_timeout = self._seconds(self.camera_config, "catalog_timeout", 30)
        self.download_timeout = self._seconds(self.camera_config, "download_timeout", 60)
        self.target_path = self._text(self.config, "target_path", None)
        self.logging_path = self._text(self.config, "logging_path", None)

    def _text(self, section, key, default):
        value = section.get(key, default)
        if value is default:
            return default
        if not isinstance(value, str) or not value:
            logger.error(f"Ignoring '{key}' in {self.config_path}: expected a non-empty string, got {value!r}")
            return default
        return value

    def _seconds(self, section, key, default):
        value = section.get(key, default)
        # bool is an int subclass; NaN and inf fail the range check
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 < value < float("inf"):
            logger.error(f"Ignoring '{key}' in {self.config_path}: expected a positive number, got {value!r}")
            return default
        return value

    @staticmethod
    def _read(config_path):
        if not config_path or not os.path.exists(config_path):
            return {}
        try:
            with open(config_path, "r") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not load {config_path}: {e}. Using defaults.")
            return {}

        if not isinstance(loaded, dict):
            logger.error(f"Could not load {config_path}: expected a JSON object. Using defaults.")
            return {}
        return loaded

    def default_target_path(self):
        """The configured target path, else ~/Pictures/RicohGRII. None if there is no home directory."""
        if self.target_path:
            return self.target_path

        home = os.path.expanduser("~")
        if not home or home == "~":
            return None
        return os.path.join(home, DEFAULT_SUBDIR)
