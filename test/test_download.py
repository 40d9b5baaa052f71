import os
import tempfile
import unittest
from unittest.mock import Mock

import requests

from gr2import.catalog import Photo
from gr2import.download import DownloadResult, download_one, photo_url
from gr2import.errors import DirectoryCreateFailed, DownloadTransportError, InvalidPath

PHOTO = Photo(name="R0001.JPG", tag="100RICOH", date="2024-05-01")


class FakeResponse:

    def __init__(self, chunks=(), status=200, headers=None, fail_after=None):
        self.chunks = list(chunks)
        self.status = status
        self.headers = headers if headers is not None else {}
        self.fail_after = fail_after
        self.closed = False

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} Client Error")

    def iter_content(self, chunk_size=1):
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index >= self.fail_after:
                raise requests.ConnectionError("connection reset by camera")
            yield chunk

    def close(self):
        self.closed = True


class TestDownloadOne(unittest.TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.base_path = tmp.name
        self.target = os.path.join(self.base_path, "2024-05-01", "R0001.JPG")
        self.session = Mock()

    def test_url(self):
        self.assertEqual(photo_url("http://192.168.0.1", PHOTO), "http://192.168.0.1/v1/photos/100RICOH/R0001.JPG")
        self.assertEqual(photo_url("http://192.168.0.1/", PHOTO), "http://192.168.0.1/v1/photos/100RICOH/R0001.JPG")

    def test_success_writes_file_and_reports_progress(self):
        response = FakeResponse([b"abcd", b"", b"efgh"], headers={"Content-Length": "8"})
        self.session.get.return_value = response
        progress = Mock()

        outcome = download_one("http://192.168.0.1", PHOTO, self.base_path, session=self.session, progress=progress)

        self.assertIs(outcome.result, DownloadResult.SUCCESS)
        self.assertEqual(outcome.path, self.target)
        self.assertIsNone(outcome.error)
        with open(self.target, "rb") as f:
            self.assertEqual(f.read(), b"abcdefgh")
        self.session.get.assert_called_once_with(
            "http://192.168.0.1/v1/photos/100RICOH/R0001.JPG", stream=True, timeout=60, allow_redirects=True)
        self.assertEqual([c.args for c in progress.call_args_list], [(4, 8), (8, 8)])
        self.assertTrue(response.closed)

    def test_unknown_length_reports_none_total(self):
        self.session.get.return_value = FakeResponse([b"abc"])
        progress = Mock()
        download_one("http://192.168.0.1", PHOTO, self.base_path, session=self.session, progress=progress)
        progress.assert_called_once_with(3, None)

    def test_custom_timeout(self):
        self.session.get.return_value = FakeResponse([b"abc"])
        download_one("http://cam", PHOTO, self.base_path, session=self.session, timeout=5)
        self.assertEqual(self.session.get.call_args.kwargs["timeout"], 5)

    def test_existing_file_is_skipped_without_request(self):
        os.makedirs(os.path.dirname(self.target))
        with open(self.target, "wb") as f:
            f.write(b"already here")

        outcome = download_one("http://192.168.0.1", PHOTO, self.base_path, session=self.session)

        self.assertIs(outcome.result, DownloadResult.SKIPPED)
        self.session.get.assert_not_called()
        with open(self.target, "rb") as f:
            self.assertEqual(f.read(), b"already here")

    def test_second_run_skips(self):
        self.session.get.return_value = FakeResponse([b"abc"])
        first = download_one("http://cam", PHOTO, self.base_path, session=self.session)
        second = download_one("http://cam", PHOTO, self.base_path, session=self.session)
        self.assertIs(first.result, DownloadResult.SUCCESS)
        self.assertIs(second.result, DownloadResult.SKIPPED)
        self.assertEqual(self.session.get.call_count, 1)

    def test_failure_mid_transfer_removes_partial_file(self):
        response = FakeResponse([b"abcd", b"efgh", b"ijkl"], headers={"Content-Length": "12"}, fail_after=1)
        self.session.get.return_value = response

        outcome = download_one("http://cam", PHOTO, self.base_path, session=self.session)

        self.assertIs(outcome.result, DownloadResult.FAILED)
        self.assertIsInstance(outcome.error, DownloadTransportError)
        self.assertIsInstance(outcome.error.__cause__, requests.ConnectionError)
        self.assertFalse(os.path.exists(self.target))
        self.assertTrue(response.closed)
        self.assertEqual(self.session.get.call_count, 1)

    def test_http_error_leaves_no_file(self):
        self.session.get.return_value = FakeResponse([b"not found"], status=404)
        outcome = download_one("http://cam", PHOTO, self.base_path, session=self.session)
        self.assertIs(outcome.result, DownloadResult.FAILED)
        self.assertFalse(os.path.exists(self.target))

    def test_timeout_is_not_retried(self):
        self.session.get.side_effect = requests.Timeout("timed out")
        outcome = download_one("http://cam", PHOTO, self.base_path, session=self.session)
        self.assertIs(outcome.result, DownloadResult.FAILED)
        self.assertFalse(os.path.exists(self.target))
        self.assertEqual(self.session.get.call_count, 1)

    def test_interrupt_removes_partial_file(self):
        def interrupted(chunk_size=1):
            yield b"abcd"
            raise KeyboardInterrupt

        response = FakeResponse()
        response.iter_content = interrupted
        self.session.get.return_value = response

        with self.assertRaises(KeyboardInterrupt):
            download_one("http://cam", PHOTO, self.base_path, session=self.session)
        self.assertFalse(os.path.exists(self.target))

    def test_invalid_base_path(self):
        for base_path in ("", "/tmp/../etc", "/tmp//photos", "/" + "a" * 600):
            with self.subTest(base_path=base_path):
                with self.assertRaises(InvalidPath):
                    download_one("http://cam", PHOTO, base_path, session=self.session)
        self.session.get.assert_not_called()

    def test_constructed_path_too_long(self):
        photo = Photo(name="x" * 255, tag="100RICOH", date="2024-05-01")
        base_path = os.path.join(self.base_path, "d" * (500 - len(self.base_path)))
        with self.assertRaises(InvalidPath):
            download_one("http://cam", photo, base_path, session=self.session)
        self.session.get.assert_not_called()

    def test_directory_create_failure(self):
        blocker = os.path.join(self.base_path, "not-a-dir")
        with open(blocker, "w") as f:
            f.write("x")

        with self.assertRaises(DirectoryCreateFailed):
            download_one("http://cam", PHOTO, blocker, session=self.session)
        self.session.get.assert_not_called()

    def test_existing_date_directory_is_fine(self):
        os.makedirs(os.path.join(self.base_path, "2024-05-01"))
        self.session.get.return_value = FakeResponse([b"abc"])
        outcome = download_one("http://cam", PHOTO, self.base_path, session=self.session)
        self.assertIs(outcome.result, DownloadResult.SUCCESS)


if __name__ == '__main__':
    unittest.main()
