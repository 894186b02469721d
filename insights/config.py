# configuration management using pydantic settings
# reads from .env file and provides type-safe config

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from insights.ranking import TopKStrategy

class Settings(BaseSettings):
    """app configuration loaded from environment variables"""

    # insight settings
    top_k: int = Field(20, gt=0)  # insights kept per record
    top_k_strategy: TopKStrategy = TopKStrategy.ABS
    batch_jobs: int = Field(1, ge=1)  # joblib threads for batch requests

    # model artifacts
    model_path: str = "models/scoring_model.pt"
    metadata_path: str = "models/vector_metadata.json"

    # api settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    @field_validator("top_k_strategy", mode="before")
    @classmethod
    def _parse_strategy(cls, value):
        return TopKStrategy.parse(value)

    class Config:
        env_file = ".env"  # load from .env file
        case_sensitive = False  # TOP_K and top_k both work
        extra = 'ignore'  # ignore extra fields in .env

# global settings instance
settings = Settings()
