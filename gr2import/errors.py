#!/usr/bin/env python3

# Every error the importer raises. Run-level errors stop the whole import,
# photo-level errors only abort the photo being processed.


class Gr2ImportError(Exception):
    pass


class ArgumentError(Gr2ImportError):
    """Bad command line flag or value."""


class CatalogFetchError(Gr2ImportError):
    """The camera's object listing could not be retrieved."""


class MalformedCatalog(Gr2ImportError):
    """The object listing is not JSON or has no 'dirs' array."""


class PhotoError(Gr2ImportError):
    """Base for errors that abort a single photo."""


class InvalidPath(PhotoError):
    pass


class DirectoryCreateFailed(PhotoError):
    pass


class DownloadTransportError(PhotoError):
    """Timeout, connection failure, non-2xx status or a failed write."""
