from pydantic import BaseModel, Field
from typing import Literal


class HashingConfig(BaseModel):
    algorithm: Literal["sha256", "sha3_256", "blake2s"] = "sha256"
    chunk_size: int = Field(default=65536, gt=0)


class ExclusionConfig(BaseModel):
    hash_file: str | None = None
    permission_file: str | None = None
    # Hash-excluded paths missing from one side are not reported as one-sided
    suppress_one_sided: bool = True


class LogConfig(BaseModel):
    directory: str = "."
    conflicts: str = "conflicts.log"
    permission_conflicts: str = "permission_conflicts.log"
    target_only: str = "target_specific.log"
    base_only: str = "base_specific.log"

    def artifact_names(self) -> list[str]:
        return [
            self.conflicts,
            self.permission_conflicts,
            self.target_only,
            self.base_only,
        ]


class FenrirConfig(BaseModel):
    hashing: HashingConfig = Field(default_factory=HashingConfig)
    exclusions: ExclusionConfig = Field(default_factory=ExclusionConfig)
    logs: LogConfig = Field(default_factory=LogConfig)
    ignore_hashes: bool = False
    ignore_permissions: bool = False
    show_matches: bool = True
    log_level: Literal["debug", "info", "warn", "error"] = "warn"
