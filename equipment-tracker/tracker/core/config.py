from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DB_PATH: str = "equipment.db"
    DB_URL: Optional[str] = None
    DB_ECHO: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    TRANSACTIONS_PAGE_SIZE: int = 100

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        return self.DB_URL or f"sqlite:///{self.DB_PATH}"


def get_settings() -> Settings:
    return Settings()
