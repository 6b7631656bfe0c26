# path: lineops/core/config.py
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class RunConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8015


class ApiV1Prefix(BaseModel):
    prefix: str = "/v1"
    subsidiaries: str = "/subsidiaries"
    users: str = "/users"
    line_types: str = "/line-types"
    lines: str = "/lines"
    faults: str = "/faults"
    line_requests: str = "/line-requests"
    maintenance: str = "/maintenance"


class ApiPrefix(BaseModel):
    prefix: str = "/api"
    v1: ApiV1Prefix = ApiV1Prefix()


class DatabaseConfig(BaseModel):
    # postgresql+asyncpg://... в проде, sqlite+aiosqlite://... в тестах
    url: str
    echo: bool = False
    echo_pool: bool = False
    pool_size: int = 50
    max_overflow: int = 10

    naming_convention: dict[str, str] = {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }


class SyncConfig(BaseModel):
    # клиенты перечитывают коллекции раз в N секунд (push-доставки нет)
    refresh_interval_seconds: int = 5


class LifecycleConfig(BaseModel):
    auto_resolve_feedback: str = "Auto-resolved by check"
    provisioned_line_location: str = "To be updated"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env.example", ".env"),
        case_sensitive=False,
        env_nested_delimiter="__",
        env_prefix="APP_CONFIG__",
        extra="ignore",
    )
    run: RunConfig = RunConfig()
    api: ApiPrefix = ApiPrefix()
    db: DatabaseConfig

    sync: SyncConfig = SyncConfig()
    lifecycle: LifecycleConfig = LifecycleConfig()


settings = Settings()
