# relay_agent/infrastructure/update/update_channel.py
import logging
from pathlib import Path
from typing import Callable, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)


class UpdateHooks(Protocol):
    def on_start(self, version: str) -> None: ...

    def on_progress(self, received: int, total: int) -> None: ...

    def on_end(self, version: str, path: Path) -> None: ...

    def on_error(self, error: Exception) -> None: ...


class UpdateChannel:
    """Polls a JSON manifest ``{"version": ..., "url": ...}`` and stages new artifacts.

    The HTTP calls are bounded by ``timeout`` and happen at most once per
    ``check_interval_ms``; nothing about the artifact is interpreted here.
    """

    CHUNK_SIZE = 4096

    def __init__(
        self,
        manifest_url: Optional[str],
        current_version: str,
        staging_dir: Path,
        hooks: UpdateHooks,
        clock: Callable[[], int],
        network_up: Callable[[], bool],
        check_interval_ms: int = 300000,
        client: Optional[httpx.Client] = None,
        timeout: float = 5.0,
    ):
        self.manifest_url = manifest_url
        self.current_version = current_version
        self.staging_dir = Path(staging_dir)
        self.hooks = hooks
        self.check_interval_ms = check_interval_ms
        self._clock = clock
        self._network_up = network_up
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._last_check_ms: Optional[int] = None
        self.staged_version: Optional[str] = None

    def is_enabled(self) -> bool:
        return bool(self.manifest_url)

    def service(self) -> None:
        if not self.is_enabled():
            return

        now = self._clock()
        if self._last_check_ms is not None and now - self._last_check_ms < self.check_interval_ms:
            return
        self._last_check_ms = now

        if not self._network_up():
            return

        try:
            manifest = self._fetch_manifest()
        except httpx.HTTPStatusError as exc:
            logger.error(f"UpdateChannel: manifest request failed: {exc.response.status_code}")
            self.hooks.on_error(exc)
            return
        except (httpx.RequestError, ValueError) as exc:
            logger.error(f"UpdateChannel: manifest unavailable: {exc}")
            self.hooks.on_error(exc)
            return

        version = manifest.get("version")
        artifact_url = manifest.get("url")
        if not version or not artifact_url:
            self.hooks.on_error(ValueError(f"Manifest missing version or url: {manifest}"))
            return

        version = str(version)
        if version in (self.current_version, self.staged_version):
            logger.debug(f"UpdateChannel: version {version} already installed or staged")
            return

        self._download(version, str(artifact_url))

    def _fetch_manifest(self) -> dict:
        resp = self._client.get(self.manifest_url)
        resp.raise_for_status()
        manifest = resp.json()
        if not isinstance(manifest, dict):
            raise ValueError("Manifest root must be an object")
        return manifest

    def _download(self, version: str, artifact_url: str) -> None:
        url = httpx.URL(self.manifest_url).join(artifact_url)
        name = Path(url.path).name or f"update-{version}.bin"
        target = self.staging_dir / name
        partial = target.with_name(target.name + ".part")

        logger.info(f"UpdateChannel: downloading version {version} from {url}")
        self.hooks.on_start(version)

        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
            with self._client.stream("GET", url) as resp:
                resp.raise_for_status()
                total = int(resp.headers.get("content-length", 0))
                received = 0
                with open(partial, "wb") as f:
                    for chunk in resp.iter_bytes(self.CHUNK_SIZE):
                        f.write(chunk)
                        received += len(chunk)
                        self.hooks.on_progress(received, total)
            partial.replace(target)
        except (httpx.HTTPError, OSError) as exc:
            logger.error(f"UpdateChannel: download of {version} failed: {exc}")
            partial.unlink(missing_ok=True)
            self.hooks.on_error(exc)
            return

        self.staged_version = version
        self.hooks.on_end(version, target)

    def close(self) -> None:
        self._client.close()
