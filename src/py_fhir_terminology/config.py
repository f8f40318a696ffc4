# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project that holds the resources shipped with the base FHIR R4 specification.
R4_PROJECT_ID = "161452d9-43b7-5c29-aa7b-c85680fa45c6"


class Settings(BaseSettings):
    """
    Manages the application's configuration settings.
    Utilizes Pydantic's BaseSettings to allow for environment variable overrides.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="PYFHIRTERMINOLOGY_",
        extra="ignore"
    )

    # --- Database ---
    database_url: str = Field(
        "sqlite:///terminology.db",
        description="SQLAlchemy URL of the database holding terminology resources and concepts."
    )
    echo_sql: bool = Field(False, description="Echo every statement executed by the engine.")

    # --- Resolution ---
    base_project_id: str = Field(
        R4_PROJECT_ID,
        description="Project whose resources lose ties against locally curated copies with the same URL."
    )


@lru_cache()
def get_settings() -> Settings:
    """Returns a cached instance of the Settings object."""
    return Settings()


# Instantiate a global settings object to be used throughout the application
settings = get_settings()
