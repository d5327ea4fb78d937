"""Executor configuration.

Priority: explicit path > RSESSION_CONFIG env > ~/.rsession/executor.json > defaults
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path.home() / ".rsession" / "executor.json"


class ExecutorConfig(BaseModel):
    transfer_buffer_size: int = Field(65536, gt=0, description="Bytes per write call when copying files to R")
    workspace_file: str = Field(".RData", description="Workspace image file in the R working directory")

    @field_validator("workspace_file")
    @classmethod
    def validate_workspace_file(cls, v: str) -> str:
        if not v or "/" in v:
            raise ValueError(f"workspace_file must be a plain filename, got {v!r}")
        return v

    @classmethod
    def load(cls, path: str | Path | None = None) -> ExecutorConfig:
        if path is None:
            env_path = os.getenv("RSESSION_CONFIG")
            if env_path:
                path = env_path
            elif DEFAULT_CONFIG_PATH.exists():
                path = DEFAULT_CONFIG_PATH
            else:
                return cls()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Executor config not found: {path}")

        data = json.loads(path.read_text())
        return cls(**data)

    def save(self, path: str | Path = DEFAULT_CONFIG_PATH) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.model_dump(), indent=2))
        return path
