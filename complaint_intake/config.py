from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Security
    staff_password: str

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    allowed_origins: List[str] = ["*"]

    # Database
    database_url: str = "sqlite:///./complaints.db"

    # Photo storage ("local" or "s3")
    blob_backend: str = "local"
    upload_dir: str = "./uploads"
    s3_bucket: Optional[str] = None
    s3_prefix: str = "photos/"

    # File Upload
    max_file_size: int = 5242880  # 5MB
    allowed_photo_types: List[str] = ["image/png", "image/jpeg"]

    class Config:
        env_file = ".env"


settings = Settings()
