from pathlib import Path

import pytest

from cygpkg.config import Config
from cygpkg.logger import configure_verbosity

SETUP_INI = """\
# This file was automatically generated at 2024-01-01 00:00:00 UTC
release: cygwin
arch: x86_64
setup-timestamp: 1704067200
setup-version: 2.929

@ bash
sdesc: "The GNU Bourne Again SHell"
ldesc: "Bash is an sh-compatible shell"
category: Base Shells
requires: coreutils
version: 5.2.21-1
install: x86_64/release/bash/bash-5.2.21-1.tar.xz 1520000 0123abcd
[prev]
version: 5.2.15-3

@ bash-completion
sdesc: "Programmable completion for bash"
ldesc: "Completion functions for the bash shell"
category: Shells
version: 2.11-2

@ vim
sdesc: "Vi IMproved"
ldesc: "Vim is an advanced text editor"
category: Editors
version: 9.0.2155-1
"""


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setenv("CYGPKG_CONFIG_DIR", str(config_dir))
    yield config_dir
    configure_verbosity(False, False)


@pytest.fixture
def index_file(tmp_path) -> Path:
    path = tmp_path / "packages" / "x86_64" / "setup.ini"
    path.parent.mkdir(parents=True)
    path.write_text(SETUP_INI, encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, isolated_config_dir, index_file) -> Config:
    isolated_config_dir.mkdir(parents=True, exist_ok=True)
    (isolated_config_dir / "cygpkg.conf").write_text(
        "[general]\n"
        f"package_dir = {tmp_path / 'packages'}\n",
        encoding="utf-8",
    )
    return Config()
