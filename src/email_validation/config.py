from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Optional full database URL override (useful for tests)
    database_url: str = ""
    db_host: str = "db"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "cms_db"
    # Database connection pool settings
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_recycle: int = 3600  # Recycle connections after 1 hour
    db_pool_pre_ping: bool = True
    # Email / SendGrid
    sendgrid_api_key: str = ""
    email_from: str = "no-reply@example.com"
    frontend_url: str = "http://localhost:3000"
    validation_email_subject: str = "Validate your email address"
    # Exactly one placeholder, replaced by the token id
    validation_link_path: str = "/validate-email/{0}"

    @property
    def validation_link_template(self) -> str:
        return f"{self.frontend_url.rstrip('/')}{self.validation_link_path}"


# module-level settings instance for convenience across the package
settings = Settings()
