from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Facility Identity API"
    ENV: str = Field("production", env="ENV")
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")

    # -------------------------------------------------
    # CORS (dashboard origins)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Profile store & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, env="SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Profile tables
    # -------------------------------------------------
    RESIDENTS_TABLE: str = Field("residents", env="RESIDENTS_TABLE")
    USERS_TABLE: str = Field("users", env="USERS_TABLE")
    EMPLOYEES_TABLE: str = Field("employees", env="EMPLOYEES_TABLE")
    GUARDS_TABLE: str = Field("security_guards", env="GUARDS_TABLE")

    # -------------------------------------------------
    # Development-only mock identifiers
    # Honoured only when ENV is "development".
    # -------------------------------------------------
    DEV_MOCK_RESIDENT_ID: Optional[str] = Field(None, env="DEV_MOCK_RESIDENT_ID")
    DEV_MOCK_EMPLOYEE_ID: Optional[str] = Field(None, env="DEV_MOCK_EMPLOYEE_ID")

    @property
    def is_production(self) -> bool:
        return self.ENV.strip().lower() in ("production", "prod")

    # Mock ids are honoured only when ENV is exactly "development"
    @property
    def is_development(self) -> bool:
        return self.ENV.strip().lower() == "development"

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()
