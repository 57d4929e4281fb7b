from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Credora rating provider (CREDORA_CLIENT_ID / CREDORA_CLIENT_SECRET sent as request headers)
    credora_client_id: str = Field(
        default="",
        validation_alias=AliasChoices("CREDORA_CLIENT_ID", "credora_client_id"),
    )
    credora_client_secret: str = Field(
        default="",
        validation_alias=AliasChoices("CREDORA_CLIENT_SECRET", "credora_client_secret"),
    )
    credora_api_url: str = Field(
        default="https://platform.credora.io/api/v2/graphql",
        validation_alias=AliasChoices("CREDORA_API_URL", "credora_api_url"),
    )
    credora_page_size: int = Field(
        default=100,
        ge=1,
        validation_alias=AliasChoices("CREDORA_PAGE_SIZE", "credora_page_size"),
    )

    # Resend transactional email
    resend_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("RESEND_API_KEY", "resend_api_key"),
    )
    resend_api_url: str = Field(
        default="https://api.resend.com",
        validation_alias=AliasChoices("RESEND_API_URL", "resend_api_url"),
    )
    ratings_from_email: str = Field(
        default="ratings-form@resend.dev",
        validation_alias=AliasChoices("RATINGS_FROM_EMAIL", "ratings_from_email"),
    )
    ratings_to_email: str = Field(
        default="darshan@credora.io",
        validation_alias=AliasChoices("RATINGS_TO_EMAIL", "ratings_to_email"),
    )
    ratings_email_subject: str = "New Asset Ratings Submission"

    # Base URL of this service, used by the review client
    ratings_api_url: str = Field(
        default="http://localhost:8000",
        validation_alias=AliasChoices("RATINGS_API_URL", "ratings_api_url"),
    )

    # App
    environment: str = "development"
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        validation_alias=AliasChoices("CORS_ORIGINS", "cors_origins"),
    )

    @model_validator(mode="after")
    def strip_credentials_and_urls(self) -> "Settings":
        """Whitespace-only credentials count as missing; base URLs lose trailing slashes."""
        self.credora_client_id = self.credora_client_id.strip()
        self.credora_client_secret = self.credora_client_secret.strip()
        self.resend_api_key = self.resend_api_key.strip()
        self.resend_api_url = self.resend_api_url.rstrip("/")
        self.ratings_api_url = self.ratings_api_url.rstrip("/")
        return self

    class Config:
        env_file = (".env", "../.env")
        extra = "ignore"
        populate_by_name = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
