from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Permission Service"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # the path component names the database, e.g. mongodb://mongo:27017/permission
    MONGO_HOST: str = "mongodb://localhost:27017/permission"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    REQUEST_TIMEOUT_SECONDS: Optional[float] = 10.0
    HEALTH_CHECK_INTERVAL: int = 5
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
