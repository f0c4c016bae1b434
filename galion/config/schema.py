# Galion Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class RemoteRecord(BaseModel):
    """A user defined remote as stored in the configuration file."""

    remote_name: str = Field(description="Display name of the remote")
    source_locator: str | None = Field(default=None, description="Source passed to rclone as srcFs")
    destination_locator: str | None = Field(default=None, description="Destination passed to rclone as dstFs")


class RcloneSettings(BaseModel):
    """How to reach the rclone remote control API."""

    url: str = Field(default="http://127.0.0.1:5572", description="Base URL of the rclone rc server")
    user: str | None = Field(default=None, description="rc basic auth user")
    password: str | None = Field(default=None, description="rc basic auth password")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    spawn: bool = Field(default=False, description="Start 'rclone rcd' when galion starts")
    binary: str = Field(default="rclone", description="rclone executable used when spawning")
    config_path: str | None = Field(default=None, description="rclone configuration file")
    ask_password: bool = Field(default=False, description="Let rclone ask for the config password")

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL."""
        return v.rstrip("/")

    @field_validator("config_path")
    @classmethod
    def expand_config_path(cls, v: str | None) -> str | None:
        """Expand ~ in the rclone config path."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class JobsSettings(BaseModel):
    """Job tracker timing."""

    poll_interval: float = Field(default=0.5, gt=0, description="Seconds between status polls while jobs run")
    refresh_interval: float = Field(default=1.0, gt=0, description="Seconds the UI waits for a key before redrawing")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")
    hide_banner: bool = Field(default=False, description="Do not print the banner on start-up")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str | None = Field(default=None, description="Path to log file")
    sync_history: str | None = Field(default=None, description="Path to the markdown sync history")

    @field_validator("log_file", "sync_history")
    @classmethod
    def expand_optional_paths(cls, v: str | None) -> str | None:
        """Expand ~ in optional paths."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class GalionConfig(BaseModel):
    """Root configuration model for galion."""

    remotes: list[RemoteRecord] = Field(default_factory=list, description="User defined remotes")
    rclone: RcloneSettings = Field(default_factory=RcloneSettings, description="rclone rc settings")
    jobs: JobsSettings = Field(default_factory=JobsSettings, description="Job tracker settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    def get_remote(self, name: str) -> RemoteRecord | None:
        """Get the first remote with the given name."""
        for remote in self.remotes:
            if remote.remote_name == name:
                return remote
        return None
