import configparser
import os
from pathlib import Path
from typing import Optional, Union

from .logger import setup_logger

_logger = setup_logger()

DEFAULT_MIRROR = "https://mirrors.kernel.org/sourceware/cygwin"


class Config:
    def __init__(self, config_dir: Optional[Union[str, Path]] = None) -> None:
        env_dir = os.environ.get("CYGPKG_CONFIG_DIR")
        if config_dir is None and env_dir:
            config_dir = env_dir
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".config" / "cygpkg"
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_path = self.config_dir / "cygpkg.conf"

        # Default values
        self.installer: str = "setup-x86_64.exe"
        self.inventory: str = "cygcheck"
        self.arch: str = "x86_64"
        self.package_dir: Path = Path.home() / "cygwin-packages"
        self.index_file: Optional[Path] = None
        self.root_dir: Optional[str] = None

        # Network Defaults
        self.mirror: str = DEFAULT_MIRROR
        self.timeout_connect: int = 10
        self.timeout_read: int = 60
        self.retries: int = 3
        self.verify_ssl: bool = True
        self.proxy_url: Optional[str] = None
        self.ca_bundle: Optional[str] = None

        self.load()

    def load(self) -> None:
        parser = configparser.ConfigParser()
        if not self.config_path.exists():
            _logger.warning(f"Config file {self.config_path} not found. Creating default config.")
            self._write_default_config()

        parser.read(self.config_path)

        # [general]
        self.installer = parser.get("general", "installer", fallback=self.installer)
        self.inventory = parser.get("general", "inventory", fallback=self.inventory)
        self.arch = parser.get("general", "arch", fallback=self.arch)
        self.package_dir = Path(parser.get("general", "package_dir", fallback=str(self.package_dir)))

        idx = parser.get("general", "index_file", fallback="")
        self.index_file = Path(idx) if idx else self.package_dir / self.arch / "setup.ini"

        root = parser.get("general", "root_dir", fallback="")
        self.root_dir = root if root else None

        # [network]
        if parser.has_section("network"):
            self.mirror = parser.get("network", "mirror", fallback=self.mirror) or DEFAULT_MIRROR
            self.timeout_connect = parser.getint("network", "timeout_connect", fallback=10)
            self.timeout_read = parser.getint("network", "timeout_read", fallback=60)
            self.retries = parser.getint("network", "retries", fallback=3)
            self.verify_ssl = parser.getboolean("network", "verify_ssl", fallback=True)

            # Handle empty strings mapping to None
            bundle = parser.get("network", "ca_bundle", fallback=None)
            self.ca_bundle = bundle if bundle else None
            p_url = parser.get("network", "proxy_url", fallback=None)
            self.proxy_url = p_url if p_url else None

    def _write_default_config(self) -> None:
        parser = configparser.ConfigParser()
        parser["general"] = {
            "installer": self.installer,
            "inventory": self.inventory,
            "arch": self.arch,
            "package_dir": str(self.package_dir),
            "index_file": "",
            "root_dir": "",
        }
        parser["network"] = {
            "mirror": self.mirror,
            "timeout_connect": str(self.timeout_connect),
            "timeout_read": str(self.timeout_read),
            "retries": str(self.retries),
            "verify_ssl": str(self.verify_ssl).lower(),
            "ca_bundle": self.ca_bundle or "",
            "proxy_url": self.proxy_url or "",
        }
        with self.config_path.open("w") as f:
            parser.write(f)
        _logger.info(f"Default config written to {self.config_path}")
