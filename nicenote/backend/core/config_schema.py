"""
Shapes of the YAML files under config/settings/.

One top-level model per file (ApplicationSchema, DatabaseSchema,
LoggingSchema, ClientSchema). Unknown keys are rejected so a typo in a
settings file fails at startup.
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    database: int
    external_api: int


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    url: str
    echo: bool
    pool_recycle: int


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# client.yaml
# =============================================================================


class AutosaveSchema(_StrictBase):
    debounce_ms: int = Field(ge=0)
    max_retries: int = Field(ge=1)
    retry_delays_ms: list[int]
    saved_display_ms: int = Field(ge=0)


class NotificationsSchema(_StrictBase):
    duration_ms: int = Field(ge=0)


class ListSchema(_StrictBase):
    page_size: int = Field(ge=1, le=100)


class ClientSchema(_StrictBase):
    autosave: AutosaveSchema
    notifications: NotificationsSchema
    list: ListSchema
