from functools import lru_cache
import json
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "change-me-mindful-dev-secret-0000"


def _parse_list_value(value: str) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except Exception:
            pass
        return [item.strip() for item in raw.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        validate_by_name=True,
        populate_by_name=True,
    )
    environment: str = Field(default="development", validation_alias=AliasChoices("ENVIRONMENT"))
    database_url: str = ""
    log_level: str = "INFO"

    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = False

    # --- Sessions ---
    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie_secure: bool = False
    session_max_age_seconds: int = 60 * 60 * 24 * 7
    admin_session_max_age_seconds: int = 8 * 60 * 60
    admin_credentials_raw: str = Field(
        default="admin:admin123,superadmin:super123",
        validation_alias=AliasChoices("ADMIN_CREDENTIALS"),
    )

    # --- AI chat ---
    ai_chat_provider: str = "mock"
    ai_chat_model: str = ""
    ai_allowed_providers_raw: str = Field(
        default="mock,gemini",
        validation_alias=AliasChoices("AI_ALLOWED_PROVIDERS"),
    )
    ai_allowed_models_gemini_raw: str = Field(
        default="gemini-1.5-flash,gemini-pro",
        validation_alias=AliasChoices("AI_ALLOWED_MODELS_GEMINI"),
    )
    ai_timeout_seconds: float = 15.0
    ai_temperature: float = 0.7
    ai_max_tokens: int = 1024

    gemini_api_key: str = ""

    chat_stream_delay_ms: int = 50
    chat_max_messages: int = 50

    # --- Limits & headers ---
    rate_limit_chat_enabled: bool = True
    rate_limit_chat_per_min: int = 30

    security_headers_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("SECURITY_HEADERS_ENABLED", "SECURE_HEADERS_ENABLED"),
    )

    admin_ip_allowlist_raw: str = Field(
        default="",
        validation_alias=AliasChoices("ADMIN_IP_ALLOWLIST"),
    )
    trusted_proxy_cidrs_raw: str = Field(
        default="",
        validation_alias=AliasChoices("TRUSTED_PROXY_CIDRS"),
    )

    cors_allow_origins: list[str] = Field(default_factory=list)
    cors_allow_methods: list[str] = Field(default_factory=lambda: [
        "GET",
        "POST",
        "PUT",
        "DELETE",
        "OPTIONS",
    ])
    cors_allow_headers: list[str] = Field(default_factory=lambda: [
        "Content-Type",
        "Accept",
    ])

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _split_csv(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            if value.strip() == "":
                return []
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def admin_ip_allowlist(self) -> list[str]:
        return _parse_list_value(self.admin_ip_allowlist_raw)

    @property
    def trusted_proxy_cidrs(self) -> list[str]:
        return _parse_list_value(self.trusted_proxy_cidrs_raw)

    @property
    def ai_allowed_providers(self) -> list[str]:
        return [p.lower() for p in _parse_list_value(self.ai_allowed_providers_raw)]

    @property
    def ai_allowed_models(self) -> dict[str, list[str]]:
        return {
            "gemini": _parse_list_value(self.ai_allowed_models_gemini_raw),
        }

    @property
    def admin_credentials(self) -> dict[str, str]:
        """``user:pass`` pairs from ADMIN_CREDENTIALS; malformed entries are skipped."""
        pairs: dict[str, str] = {}
        for item in _parse_list_value(self.admin_credentials_raw):
            username, sep, password = item.partition(":")
            if not sep or not username.strip() or not password:
                continue
            pairs[username.strip()] = password
        return pairs

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}

    def validate_required_config(self) -> list[str]:
        errors: list[str] = []
        if self.session_secret == DEFAULT_SESSION_SECRET:
            errors.append("SESSION_SECRET is using the development default")
        if len(self.session_secret) < 32:
            errors.append("SESSION_SECRET must be at least 32 characters")
        if not self.admin_credentials:
            errors.append("ADMIN_CREDENTIALS has no valid user:password pairs")

        provider = self.ai_chat_provider.lower().strip()
        if provider == "gemini" and not self.gemini_api_key:
            errors.append(f"AI_CHAT_PROVIDER={provider} has no API key configured")
        if provider and provider not in self.ai_allowed_providers:
            errors.append(f"AI_CHAT_PROVIDER={provider} is not in AI_ALLOWED_PROVIDERS")
        return errors


@lru_cache
def get_settings() -> Settings:
    return Settings()
