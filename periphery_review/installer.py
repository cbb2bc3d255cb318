"""Download Periphery release binaries from GitHub.

Usage:
    installer = Installer("latest")
    installer.install("bin/periphery", force=True)
"""

import io
import logging
import os
import stat
import zipfile
from pathlib import Path

import requests

from periphery_review.errors import InstallError

logger = logging.getLogger(__name__)

LATEST_RELEASE_URL = "https://api.github.com/repos/peripheryapp/periphery/releases/latest"
DOWNLOAD_URL = "https://github.com/peripheryapp/periphery/releases/download/{tag}/periphery-{tag}.zip"
EXECUTABLE_NAME = "periphery"


class Installer:
    """Resolve a Periphery release and install its executable."""

    def __init__(self, version: str = "latest", session: requests.Session | None = None,
                 timeout: int = 60) -> None:
        self.version = str(version)
        self._session = session or requests.Session()
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def install(self, path: str | os.PathLike, force: bool = False) -> Path:
        """Download the release archive and extract the executable to *path*.

        Raises:
            FileExistsError: *path* exists and *force* is False.
            InstallError:    the release or archive could not be fetched.
        """
        target = Path(path)
        if target.exists() and not force:
            raise FileExistsError(f"{target} already exists")

        url = self.download_url()
        logger.info("Downloading Periphery from %s", url)
        archive = self._fetch(url).content

        try:
            with zipfile.ZipFile(io.BytesIO(archive)) as zf:
                member = _find_executable(zf)
                data = zf.read(member)
        except zipfile.BadZipFile as exc:
            raise InstallError(f"Downloaded archive from {url} is not a valid zip file") from exc

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        logger.info("Installed Periphery %s to %s", self.version, target)
        return target

    def download_url(self) -> str:
        return DOWNLOAD_URL.format(tag=self.resolve_tag())

    def resolve_tag(self) -> str:
        """Return the release tag, asking GitHub when the version is "latest"."""
        if self.version != "latest":
            return self.version
        payload = self._fetch(LATEST_RELEASE_URL).json()
        try:
            return payload["tag_name"]
        except (KeyError, TypeError) as exc:
            raise InstallError("GitHub release response has no 'tag_name'") from exc

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fetch(self, url: str) -> requests.Response:
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.exceptions.RequestException as exc:
            raise InstallError(f"Unable to reach '{url}': {exc}") from exc

        if response.status_code == 404:
            raise InstallError(f"Periphery release not found: {url}")
        if not response.ok:
            raise InstallError(f"Unexpected response {response.status_code} from {url}")
        return response


def _find_executable(zf: zipfile.ZipFile) -> str:
    for name in zf.namelist():
        if Path(name).name == EXECUTABLE_NAME:
            return name
    raise InstallError(f"Archive does not contain a '{EXECUTABLE_NAME}' executable")
