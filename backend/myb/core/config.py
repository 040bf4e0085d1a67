from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "myb"
    environment: str = "dev"
    api_host: str = "0.0.0.0"
    api_port: int = 4000

    data_dir: str = "./data"
    uploads_dir: str = "./uploads"
    storage_backend: str = "json"
    database_url: str = "sqlite:///./data/myb.db"

    jwt_secret: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 12
    admin_user: str = "admin@example.com"
    admin_pass: str = "445"

    max_upload_bytes: int = 50 * 1024 * 1024
    max_request_bytes: int = 70 * 1024 * 1024
    enforce_references: bool = True
    upload_requires_admin: bool = False

    rate_limit_per_min: int = 120

    log_level: str = "INFO"


settings = Settings()
