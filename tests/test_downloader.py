from unittest import mock

import pytest
import requests

from cygpkg.downloader import Downloader
from cygpkg.errors import DownloadError


def make_response(chunks, status_error=None):
    resp = mock.MagicMock()
    resp.__enter__.return_value = resp
    resp.headers = {"content-length": str(sum(len(c) for c in chunks))}
    resp.iter_content.return_value = chunks
    if status_error:
        resp.raise_for_status.side_effect = status_error
    return resp


def test_download_to_file(config, tmp_path):
    dl = Downloader(config)
    target = tmp_path / "out" / "setup.xz"
    with mock.patch.object(dl.session, "get", return_value=make_response([b"abc", b"", b"def"])) as get:
        dl.download_to_file("https://mirror.example.org/x86_64/setup.xz", target)
    assert target.read_bytes() == b"abcdef"
    assert get.call_args[1]["timeout"] == (config.timeout_connect, config.timeout_read)


def test_download_http_error(config, tmp_path):
    dl = Downloader(config)
    resp = make_response([], status_error=requests.exceptions.HTTPError("404 Not Found"))
    with mock.patch.object(dl.session, "get", return_value=resp):
        with pytest.raises(DownloadError, match="404"):
            dl.download_to_file("https://mirror.example.org/x86_64/setup.xz", tmp_path / "setup.xz")


def test_session_settings(config):
    config.proxy_url = "http://proxy:3128"
    config.verify_ssl = False
    dl = Downloader(config)
    assert dl.session.proxies["https"] == "http://proxy:3128"
    assert dl.session.verify is False
    assert dl.session.trust_env is False
