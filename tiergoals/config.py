from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = ""
    sqlite_path: str = "data/goals.db"
    log_path: str = "logs/app.log"
    log_level: str = "INFO"
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24
    host: str = "0.0.0.0"
    port: int = 8000
    run_migrations: bool = True


settings = Settings()
