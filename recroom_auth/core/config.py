from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class AppSettings(BaseSettings):
    app_name: str = Field(default="recroom-auth", alias="APP_NAME")
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    api_prefix: str = Field(default="", alias="API_PREFIX")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    # Тело запроса больше лимита отклоняется как INVALID_BODY
    max_body_bytes: int = Field(default=64 * 1024, gt=0, alias="MAX_BODY_BYTES")

    # Время жизни токена сброса пароля (in-memory сервис)
    reset_token_ttl_seconds: int = Field(default=3600, gt=0, alias="RESET_TOKEN_TTL_SECONDS")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )
