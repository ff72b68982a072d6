# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import yaml
from pathlib import Path
from typing import List, Optional, Dict
from pydantic import BaseModel

# Environment variables of the deployed service and the config field they override
ENV_OVERRIDES = {
    "MEDIA_PATH": "media_path",
    "USE_LOCAL_FILES": "use_local_files",
    "SSH_SERVER": "ssh_server",
    "SSH_PATH": "ssh_path",
    "SSH_KEY": "ssh_key",
    "TMDB_API_KEY": "tmdb_api_key",
    "PORT": "server_port",
}


class Config(BaseModel):
    media_path: Path = Path("test-media")
    use_local_files: bool = False
    ssh_server: str = "ssh.thimotefetu.fr"
    ssh_path: str = "/mnt/streaming"
    ssh_key: str = "~/.ssh/streaming_key"
    ssh_timeout_seconds: int = 10
    stream_timeout_seconds: int = 300
    media_extensions: List[str] = [".mp4", ".mkv", ".avi", ".mov", ".mp3", ".flac", ".wav"]
    category_directories: Dict[str, str] = {
        "films": "Films",
        "series": "Séries",
        "musiques": "Musiques",
    }
    tmdb_api_key: Optional[str] = None
    tmdb_language: str = "fr-FR"
    enrich_metadata: bool = False
    server_port: int = 3001
    server_host: str = "0.0.0.0"
    refresh_interval_minutes: int = 30
    watch_local_changes: bool = True
    search_limit: int = 20
    verbose: bool = False

    @classmethod
    def load(cls, path: str = "config.yaml", environ: Optional[Dict[str, str]] = None) -> "Config":
        data = {}
        if path and Path(path).exists():
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        environ = os.environ if environ is None else environ
        for env_name, field_name in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                data[field_name] = value
        return cls(**data)

    def directory_for(self, category) -> str:
        return self.category_directories.get(category.value, category.value.capitalize())
