"""Core orchestrator - decides, per local file, whether and where to upload it."""
import asyncio
import logging
import os
import stat
from pathlib import Path
from typing import Callable, Optional, Union

from ..errors import InvalidKeyError, LocalFileError, UploadTimeoutError
from ..models import UploadConfig
from ..protocols import IObjectStore
from ..utils.events import EventEmitter
from .content_type import resolve_content_type
from .file_collector import FileCollector
from .file_existence import ExistencePolicy
from .key_mapper import map_key, normalize_remote_path
from .models import UploadRun, UploadTask
from .progress import ProgressReader

logger = logging.getLogger(__name__)

FileProgressCallback = Callable[[UploadTask, int, int], None]


class UploadOrchestrator:
    """
    Uploads a file or a directory tree to the object store, one file at a time.

    The first filesystem or store failure aborts the whole run. Files written
    before the failure stay written.

    Events (subscribe with ``on``):
        skip(key, local_path)
        file_start(task, index)
        file_complete(task)
        finish(run)

    Usage:
        orchestrator = UploadOrchestrator(storage, UploadConfig(force=False))
        orchestrator.on("skip", lambda key, path: print(f"skip {key}"))
        run = await orchestrator.run("./site", "/www")
        print(run.summary)
    """

    def __init__(
        self,
        storage: IObjectStore,
        config: Optional[UploadConfig] = None,
        collector: Optional[FileCollector] = None,
    ):
        """
        Initialize orchestrator with dependencies.

        Args:
            storage: Object store client
            config: Upload configuration
            collector: Filesystem walker
        """
        self._storage = storage
        self._config = config or UploadConfig()
        self._collector = collector or FileCollector()
        self._existence = ExistencePolicy(storage, self._config.head_error_policy)
        self._events = EventEmitter()

    @property
    def config(self) -> UploadConfig:
        return self._config

    def on(self, event_name: str, callback: Callable) -> "UploadOrchestrator":
        self._events.on(event_name, callback)
        return self

    async def run(
        self,
        local_path: Union[str, Path],
        remote_path: str,
        force: Optional[bool] = None,
        progress_callback: Optional[FileProgressCallback] = None,
    ) -> UploadRun:
        """
        Upload local_path to remote_path.

        Args:
            local_path: File or directory to upload
            remote_path: Key (single file) or key prefix (directory)
            force: Overwrite without checking existence; defaults to config.force
            progress_callback: Called with (task, bytes_read, total) while streaming

        Returns:
            UploadRun with final uploaded/skipped counts

        Raises:
            UploaderError: any fatal condition; the run stops immediately
        """
        force = self._config.force if force is None else force
        try:
            return await asyncio.wait_for(
                self._run(Path(local_path), remote_path, force, progress_callback),
                timeout=self._config.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise UploadTimeoutError(
                f"upload did not finish within {self._config.timeout:g} seconds"
            ) from exc

    async def _run(
        self,
        local_path: Path,
        remote_path: str,
        force: bool,
        progress_callback: Optional[FileProgressCallback],
    ) -> UploadRun:
        remote_path = normalize_remote_path(remote_path)
        logger.info('upload "%s" to "%s"', local_path, remote_path)

        try:
            info = os.stat(local_path)
        except OSError as exc:
            raise LocalFileError(f"cannot stat {local_path}: {exc}", str(local_path)) from exc

        root = Path(os.path.abspath(local_path))

        if stat.S_ISDIR(info.st_mode):
            run = UploadRun(root, remote_path, force, is_directory=True)
            for entry in self._collector.iter_files(root):
                key = map_key(root, entry.path, remote_path)
                await self._process(run, entry.path, key, progress_callback)
        else:
            if not remote_path:
                raise InvalidKeyError("remote path is empty, a single file upload needs a key")
            run = UploadRun(root, remote_path, force)
            await self._process(run, root, remote_path, progress_callback)

        logger.info(run.summary)
        await self._events.emit("finish", run)
        return run

    async def _process(
        self,
        run: UploadRun,
        path: Path,
        key: str,
        progress_callback: Optional[FileProgressCallback],
    ) -> None:
        if await self._existence.should_skip(key, run.force):
            run.skipped_count += 1
            logger.info('"%s" exists, skipping', key)
            await self._events.emit("skip", key, path)
            return

        task = await self._upload(path, key, run.uploaded_count, progress_callback)
        run.uploaded_count += 1
        await self._events.emit("file_complete", task)

    async def _upload(
        self,
        path: Path,
        key: str,
        index: int,
        progress_callback: Optional[FileProgressCallback],
    ) -> UploadTask:
        content_type = resolve_content_type(path.name)

        try:
            fh = open(path, "rb")
        except OSError as exc:
            raise LocalFileError(f"cannot open {path}: {exc}", str(path)) from exc

        # On timeout the cancelled run closes fh here; a put still running on its worker thread then fails reading it
        with fh:
            try:
                size = os.fstat(fh.fileno()).st_size
            except OSError as exc:
                raise LocalFileError(f"cannot stat {path}: {exc}", str(path)) from exc

            task = UploadTask(path, key, size, content_type)
            logger.info("uploading [%4d] %s as %s", index, key, content_type or "(store default)")
            await self._events.emit("file_start", task, index)

            def on_read(read: int, total: int) -> None:
                if progress_callback:
                    progress_callback(task, read, total)

            body = ProgressReader(fh, size, on_read)
            try:
                await self._storage.put(key, body, content_type, size)
            except OSError as exc:
                raise LocalFileError(f"cannot read {path}: {exc}", str(path)) from exc

        return task
