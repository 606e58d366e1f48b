from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── App ──────────────────────────────────────────────────────────────────
    app_name: str = "Xeinst"
    app_version: str = "1.0.0"
    debug: bool = False

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(
        default="json", alias="LOG_FORMAT"
    )

    # ── AWS Region ───────────────────────────────────────────────────────────
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")

    # ── Catalog ──────────────────────────────────────────────────────────────
    # static   → built-in demo catalog, no AWS access
    # dynamodb → single-table catalog read through the DAO layer
    catalog_backend: Literal["static", "dynamodb"] = Field(
        default="static", alias="CATALOG_BACKEND"
    )
    dynamodb_table_name: str = Field(
        default="XeinstMarketplace", alias="DYNAMODB_TABLE_NAME"
    )
    dashboard_recent_agents: int = Field(default=5, ge=1, le=50)
    dashboard_recent_activity: int = Field(default=10, ge=1, le=100)

    # ── AWS Cognito ───────────────────────────────────────────────────────────
    cognito_user_pool_id: str = Field(default="", alias="COGNITO_USER_POOL_ID")
    cognito_client_id: str = Field(default="", alias="COGNITO_CLIENT_ID")
    cognito_region: str = Field(default="us-east-1", alias="COGNITO_REGION")
    # Members of this Cognito group are shown creator affordances
    cognito_creator_group: str = Field(
        default="creators", alias="COGNITO_CREATOR_GROUP"
    )

    # ── Session ──────────────────────────────────────────────────────────────
    session_cookie_name: str = Field(
        default="xeinst_session", alias="SESSION_COOKIE_NAME"
    )
    # Hosted sign-in UI; the /auth/signin page links here when set
    signin_url: str = Field(default="", alias="SIGNIN_URL")
    support_email: str = "support@xeinst.com"

    # ── CORS ─────────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"], alias="CORS_ORIGINS"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
