from typing import Annotated, Any, Literal
from urllib.parse import quote_plus

from pydantic import (
    AnyUrl,
    BeforeValidator,
    Field,
    SecretStr,
    computed_field,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "Web Notifications API"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: AnyUrl | None = None

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # Application database (MySQL)
    DB_HOST: str = "mysql-wn"
    DB_PORT: int = 3306
    DB_USER: str = "web_user"
    DB_PASSWORD: SecretStr = SecretStr("web_pass")
    DB_NAME: str = "web_notifications"
    DB_ECHO: bool = False

    # Connection pool: max open connections and max waiters (0 = unbounded)
    DB_CONNECTION_LIMIT: int = Field(default=15, ge=1)
    DB_QUEUE_LIMIT: int = Field(default=0, ge=0)
    DB_CONNECT_TIMEOUT_MS: int = Field(default=20000, gt=0)
    DB_KEEPALIVE: bool = True
    DB_KEEPALIVE_INITIAL_DELAY_MS: int = Field(default=10000, ge=0)

    @computed_field(repr=False)  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        return (
            f"mysql+pymysql://{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASSWORD.get_secret_value())}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
        )


settings = Settings()  # type: ignore
