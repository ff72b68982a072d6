# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import shlex
import logging
import subprocess
from pathlib import Path
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class ListingError(Exception):
    """
    Raised when the media source cannot be listed or read.
    """


class LocalLister:
    """
    Lists media files below a local directory.
    """

    def __init__(self, media_root: Path, extensions: List[str], blacklist: List[str] = None):
        self.media_root = Path(media_root)
        self.extensions = {ext.lower() for ext in extensions}
        self.blacklist = set(blacklist) if blacklist else {"#recycle", "@eaDir", ".DS_Store"}

    def list_directories(self) -> List[str]:
        if not self.media_root.is_dir():
            return []
        return sorted(
            entry.name for entry in self.media_root.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )

    def list_files(self, directory: str) -> List[str]:
        root_path = self.media_root / directory
        if not root_path.is_dir():
            return []

        files = []
        try:
            for root, dirs, names in os.walk(root_path):
                # Modify dirs in place to skip blacklisted directories
                dirs[:] = [d for d in dirs if d not in self.blacklist]
                for name in names:
                    if name in self.blacklist:
                        continue
                    if Path(name).suffix.lower() in self.extensions:
                        files.append(str(Path(root) / name))
        except OSError as e:
            raise ListingError(f"Cannot list {root_path}: {e}") from e
        return sorted(files)

    def web_path(self, file_path: str) -> str:
        """
        Path exposed to clients: relative to the media root, with a leading slash.
        """
        relative = Path(file_path).relative_to(self.media_root)
        return "/" + relative.as_posix()

    def resolve(self, web_path: str) -> Optional[Path]:
        """
        Maps a client path back to a file, refusing anything outside the media root.
        """
        root = self.media_root.resolve()
        candidate = (root / web_path.lstrip("/")).resolve()
        if candidate != root and root not in candidate.parents:
            return None
        return candidate

    def local_path(self, file_path: str) -> Optional[Path]:
        return Path(file_path)


class SSHLister:
    """
    Lists and reads media files on a remote host through the ssh client.
    """

    def __init__(
        self,
        server: str,
        remote_root: str,
        extensions: List[str],
        key_path: str = "~/.ssh/streaming_key",
        timeout: int = 10,
        stream_timeout: int = 300,
    ):
        self.server = server
        self.remote_root = remote_root.rstrip("/")
        self.extensions = [ext.lower() for ext in extensions]
        self.key_path = os.path.expanduser(key_path)
        self.timeout = timeout
        self.stream_timeout = stream_timeout

    def _ssh_command(self, remote_command: str) -> List[str]:
        return [
            "ssh",
            "-i", self.key_path,
            "-o", "PasswordAuthentication=no",
            "-o", "StrictHostKeyChecking=no",
            self.server,
            remote_command,
        ]

    def _run(self, remote_command: str) -> str:
        logger.debug(f"SSH {self.server}: {remote_command}")
        try:
            result = subprocess.run(
                self._ssh_command(remote_command),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise ListingError(f"SSH command failed ({e.returncode}): {e.stderr.strip()}") from e
        except (subprocess.TimeoutExpired, OSError) as e:
            raise ListingError(f"SSH command failed: {e}") from e

        if result.stderr:
            logger.warning(f"SSH stderr: {result.stderr.strip()}")
        return result.stdout

    def list_directories(self) -> List[str]:
        command = f"find {shlex.quote(self.remote_root)} -mindepth 1 -maxdepth 1 -type d"
        output = self._run(command)
        names = [line.rstrip("/").split("/")[-1] for line in output.splitlines() if line.strip()]
        return sorted(name for name in names if name and not name.startswith("."))

    def list_files(self, directory: str) -> List[str]:
        name_filters = " -o ".join(f"-iname {shlex.quote('*' + ext)}" for ext in self.extensions)
        target = shlex.quote(f"{self.remote_root}/{directory}")
        output = self._run(f"find {target} -type f \\( {name_filters} \\)")
        return sorted(line.strip() for line in output.splitlines() if line.strip())

    def web_path(self, file_path: str) -> str:
        return file_path

    def resolve(self, web_path: str) -> Optional[str]:
        normalized = os.path.normpath("/" + web_path.lstrip("/"))
        if not normalized.startswith(self.remote_root + "/"):
            return None
        return normalized

    def local_path(self, file_path: str) -> Optional[Path]:
        # Remote files cannot be opened directly
        return None

    def stream(self, remote_path: str) -> Iterator[bytes]:
        """
        Yields the remote file's bytes as produced by `cat`.
        """
        command = self._ssh_command(f"cat {shlex.quote(remote_path)}")
        try:
            process = subprocess.Popen(command, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as e:
            raise ListingError(f"Cannot start ssh: {e}") from e

        def generate():
            try:
                while True:
                    chunk = process.stdout.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk
            finally:
                process.stdout.close()
                if process.poll() is None:
                    process.kill()
                process.wait(timeout=self.stream_timeout)
                stderr = process.stderr.read()
                process.stderr.close()
                if stderr:
                    logger.warning(f"SSH stderr while streaming {remote_path}: {stderr.decode(errors='replace').strip()}")

        return generate()


def create_lister(config):
    """
    Local lister when the service runs next to the files, SSH lister otherwise.
    """
    if config.use_local_files:
        return LocalLister(config.media_path, config.media_extensions)
    return SSHLister(
        config.ssh_server,
        config.ssh_path,
        config.media_extensions,
        key_path=config.ssh_key,
        timeout=config.ssh_timeout_seconds,
        stream_timeout=config.stream_timeout_seconds,
    )
