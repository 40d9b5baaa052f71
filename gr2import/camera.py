#!/usr/bin/env python3

import requests

from gr2import.catalog import parse_catalog
from gr2import.config import DEFAULT_BASE_URL
from gr2import.download import download_one
from gr2import.errors import CatalogFetchError
from gr2import.logger import logger


class RicohCamera:
    """
    The GR II's HTTP API. The computer must already be on the camera's Wi-Fi.

      GET /_gr/objs                  -> JSON listing of directories and files
      GET /v1/photos/{tag}/{name}    -> the file itself
    """

    def __init__(self, base_url=DEFAULT_BASE_URL, catalog_timeout=30,
                 download_timeout=60, session=None):
        self.base_url = base_url.rstrip("/")
        self.catalog_timeout = catalog_timeout
        self.download_timeout = download_timeout
        self.session = session if session is not None else requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.session.close()

    def fetch_catalog(self):
        url = f"{self.base_url}/_gr/objs"
        logger.info(f"Fetching photo list from {url}..")
        try:
            resp = self.session.get(url, timeout=self.catalog_timeout, allow_redirects=True)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise CatalogFetchError(
                f"Cannot read the photo list from the camera at {self.base_url}.\n"
                "Common causes:\n"
                "- Computer not connected to the camera's Wi-Fi\n"
                "- Camera asleep or Wi-Fi switched off\n"
                f"Underlying error: {e}"
            ) from e
        return resp.content

    def list_photos(self):
        return parse_catalog(self.fetch_catalog())

    def download(self, photo, base_path, progress=None):
        return download_one(self.base_url, photo, base_path, session=self.session,
                            progress=progress, timeout=self.download_timeout)
