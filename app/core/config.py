from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.authoring.constants import DEFAULT_BEVERAGE_CATEGORY_KEYWORDS, DEFAULT_MAX_GENERATED_QUESTIONS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")
    enable_openapi_docs: bool = Field(default=True, alias="ENABLE_OPENAPI_DOCS")

    authoring_api_base_url: str = Field(
        default="http://localhost:3000/api",
        alias="AUTHORING_API_BASE_URL",
    )
    authoring_api_token: str = Field(default="", alias="AUTHORING_API_TOKEN")
    authoring_api_timeout_seconds: float = Field(default=30.0, alias="AUTHORING_API_TIMEOUT_SECONDS")

    beverage_category_keywords: str = Field(
        default=",".join(DEFAULT_BEVERAGE_CATEGORY_KEYWORDS),
        alias="BEVERAGE_CATEGORY_KEYWORDS",
    )
    ai_generation_max_questions: int = Field(
        default=DEFAULT_MAX_GENERATED_QUESTIONS,
        alias="AI_GENERATION_MAX_QUESTIONS",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def parse_keyword_list(raw: str) -> tuple[str, ...]:
    keywords: list[str] = []
    for entry in raw.split(","):
        keyword = entry.strip().lower()
        if keyword and keyword not in keywords:
            keywords.append(keyword)
    return tuple(keywords)


def get_beverage_category_keywords() -> tuple[str, ...]:
    return parse_keyword_list(get_settings().beverage_category_keywords)
