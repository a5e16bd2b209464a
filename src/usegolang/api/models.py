"""
API Data Models - dev server request/response formats
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response format for /health"""

    status: str = Field(default="healthy")
    version: str = Field(description="use-golang version")
    mode: str = Field(description="Plugin build mode")
    tinygo_path: str = Field(description="TinyGo executable in use")
    optimization: str = Field(description="TinyGo -opt level")
    build_dir: str = Field(description="Absolute build root")


class HotUpdateRequest(BaseModel):
    """Change notification sent by a file watcher"""

    file: str = Field(
        description="Changed file, absolute or relative to the project root"
    )


class HotUpdateResponse(BaseModel):
    """Whether the change triggered a full reload"""

    file: str
    reloaded: bool
    clients: int = Field(
        default=0,
        description="Number of connected clients notified"
    )
