"""Application configuration for the benchmark profiling engine.

Loads settings from a .env file or environment variables with the
TALENTSCOPE_ prefix. Statistical constants (percentile, minimum sample
size, page size) are module constants in talentscope.benchmarks and are
deliberately not configurable here.
"""

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """TalentScope application settings.

    All settings are loaded from environment variables with TALENTSCOPE_
    prefix, or from a .env file in the working directory.
    """

    database_url: str = "sqlite:///data/talentscope.db"
    debug: bool = False
    max_workers: int = 4
    job_timeout_seconds: Optional[float] = None

    model_config = {
        "env_file": ".env",
        "env_prefix": "TALENTSCOPE_",
    }

    @model_validator(mode="after")
    def validate_worker_pool(self) -> "Settings":
        """Reject pool sizes and timeouts that cannot run a job."""
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.job_timeout_seconds is not None and self.job_timeout_seconds <= 0:
            raise ValueError("job_timeout_seconds must be positive when set")
        return self


def get_settings() -> Settings:
    """Create and return a Settings instance.

    Raises a clear error message if the environment holds invalid values.
    """
    try:
        return Settings()
    except Exception as e:
        raise RuntimeError(
            f"Failed to load TalentScope settings: {e}\n"
            "Check the TALENTSCOPE_* environment variables or the .env file."
        ) from e
