from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "dev"
    auth_mode: str = "none"  # none | forwardauth
    root_path: str = ""
    log_level: str = "INFO"

    postgres_db: str = "family_association"
    postgres_user: str = "family_user"
    postgres_password: str = "family_pass"
    postgres_host: str = "db"
    postgres_port: int = 5432
    # Used verbatim when set (e.g. "sqlite:///./family.db" for local runs).
    database_url_override: str | None = None

    # Family-tree traversal bounds.
    default_tree_degree: int = 2
    max_tree_degree: int = 6

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
