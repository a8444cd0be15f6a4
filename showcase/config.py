from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./showcase.db"

    # Blob storage
    storage_backend: str = "s3"  # "s3" or "local"
    s3_bucket: str = "student-showcase"
    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    s3_endpoint_url: Optional[str] = None
    storage_public_base_url: Optional[str] = None
    storage_folder: str = "student-works"

    # File Upload
    upload_dir: str = "./uploads"
    max_file_size: int = 314572800  # 300MB

    # Access
    require_institutional_email: bool = True
    admin_emails: List[str] = []

    # Server
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
