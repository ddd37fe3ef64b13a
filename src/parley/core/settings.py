"""Application settings and configuration.

This module defines the configuration options for Parley. Settings are loaded
from environment variables with sensible defaults. Key-derivation parameters
are deliberately absent: they live as constants in ``parley.core.security``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or a ``.env`` file.
    """

    # Application metadata
    app_name: str = Field(default="Parley", alias="APP_NAME")

    # Database configuration
    database_url: str = Field(default="sqlite:///./parley.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Wall clock steps backward larger than this are reported at WARNING
    clock_max_backward_seconds: int = Field(
        default=300,
        ge=0,
        alias="CLOCK_MAX_BACKWARD_SECONDS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
