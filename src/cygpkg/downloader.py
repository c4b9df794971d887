from __future__ import annotations

import atexit
from pathlib import Path
from typing import Optional, Union

import requests
import urllib3
from requests.adapters import HTTPAdapter, Retry
from tqdm import tqdm

from .config import Config
from .errors import DownloadError
from .logger import setup_logger

_logger = setup_logger()


class Downloader:
    """
    requests-based downloader for mirror files, with retries and a progress bar.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.proxy_url = config.proxy_url
        self.verify_ssl = config.verify_ssl
        self.ca_bundle = config.ca_bundle
        self.retries = config.retries
        self.timeout = (config.timeout_connect, config.timeout_read)

        self.session: Optional[requests.Session] = None
        self._init_session()
        atexit.register(self.close)

    def _init_session(self) -> None:
        self.session = requests.Session()

        # Ignore environment proxies; the config is authoritative
        self.session.trust_env = False

        if self.proxy_url:
            self.session.proxies.update({"http": self.proxy_url, "https": self.proxy_url})

        retry_strategy = Retry(
            total=self.retries,
            backoff_factor=0.3,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        if not self.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            self.session.verify = False
            _logger.warning("SSL verification disabled (Insecure).")
        else:
            self.session.verify = self.ca_bundle if self.ca_bundle else True

    def close(self) -> None:
        if self.session:
            self.session.close()

    def download_to_file(self, url: str, output_path: Union[str, Path]) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        _logger.debug("Downloading %s -> %s", url, output_path)

        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                total = int(resp.headers.get("content-length", 0) or 0)
                with open(output_path, "wb") as fh:
                    with tqdm(total=total, unit="B", unit_scale=True, desc=output_path.name) as bar:
                        for chunk in resp.iter_content(chunk_size=8192):
                            if chunk:
                                fh.write(chunk)
                                bar.update(len(chunk))
        except requests.exceptions.RequestException as e:
            raise DownloadError(f"Failed to download {url}: {e}")

        _logger.debug("Downloaded %s", url)
