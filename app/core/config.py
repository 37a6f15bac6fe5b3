from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    mongodb_uri: str = Field(default="mongodb://localhost:27017/sbom_db")
    database_name: str = Field(default="sbom_db")
    secret_key: str = Field(default="change-me-to-a-long-random-secret-key")
    algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=30)
    log_level: str = Field(default="INFO")
    max_graph_nodes: int = Field(default=50000)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
