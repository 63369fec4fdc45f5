"""Application settings loaded from the environment."""

from typing import Optional

from pydantic import Field, PostgresDsn, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from workledger.core.config.enums import CycleResetMode, Environment


class Settings(BaseSettings):
    """Workledger settings.

    Every attribute can be overridden through an environment variable of the
    same name (or from a ``.env`` file in the working directory).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "workledger"
    ENVIRONMENT: Environment = Environment.LOCAL
    LOCAL_DEVELOPMENT: bool = False
    TESTING: bool = False
    LOG_LEVEL: str = "INFO"
    ADDITIONAL_CORS_ORIGINS: Optional[str] = None

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "workledger"
    POSTGRES_PASSWORD: str = "workledger"
    POSTGRES_DB: str = "workledger"
    POSTGRES_SSLMODE: str = "prefer"
    db_pool_size: int = Field(20, ge=1)
    db_pool_max_overflow: int = Field(40, ge=0)
    RUN_ALEMBIC_MIGRATIONS: bool = False

    # Scheduled jobs
    CRON_SECRET: Optional[str] = None
    CYCLE_RESET_MODE: CycleResetMode = CycleResetMode.ON_OR_BEFORE
    WEEKLY_RECAP_DAYS: int = Field(7, ge=1)

    # Hours logged when a task is completed without estimate or actual hours
    DEFAULT_TASK_HOURS: float = Field(1.0, ge=0)

    # Payment provider price references, one per plan code
    PRICE_STARTER: Optional[str] = None
    PRICE_GROWTH: Optional[str] = None
    PRICE_SCALE: Optional[str] = None
    PRICE_DEDICATED: Optional[str] = None

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_ASYNC_DATABASE_URI(self) -> str:  # noqa: N802
        """Async SQLAlchemy connection URI built from the POSTGRES_* settings."""
        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_HOST,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )

    def configured_price_references(self) -> dict[str, str]:
        """Return the configured ``price reference -> plan code`` pairs."""
        pairs = {
            self.PRICE_STARTER: "starter",
            self.PRICE_GROWTH: "growth",
            self.PRICE_SCALE: "scale",
            self.PRICE_DEDICATED: "dedicated",
        }
        return {price: code for price, code in pairs.items() if price}
