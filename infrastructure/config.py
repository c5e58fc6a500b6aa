import json
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_ALLOWED_CONTENT_TYPES = [
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain",
    "text/csv",
    "image/jpeg",
    "image/png",
    "image/gif",
    "video/mp4",
    "audio/mpeg",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # absolute so a different CWD (tests, uvicorn --reload) still finds it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="DocuVault", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")

    # MongoDB
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias="MONGO_URI",
    )
    mongo_db: str = Field(default="docuvault", validation_alias="MONGO_DB")
    mongo_documents_collection: str = Field(
        default="documents",
        validation_alias="MONGO_DOCUMENTS_COLLECTION",
    )
    mongo_folders_collection: str = Field(
        default="folders",
        validation_alias="MONGO_FOLDERS_COLLECTION",
    )
    mongo_folder_documents_collection: str = Field(
        default="folder_documents",
        validation_alias="MONGO_FOLDER_DOCUMENTS_COLLECTION",
    )
    mongo_shares_collection: str = Field(
        default="document_shares",
        validation_alias="MONGO_SHARES_COLLECTION",
    )
    mongo_users_collection: str = Field(default="users", validation_alias="MONGO_USERS_COLLECTION")
    mongo_notifications_collection: str = Field(
        default="notifications",
        validation_alias="MONGO_NOTIFICATIONS_COLLECTION",
    )

    # Blob Storage
    blob_base_url: str = Field(
        default="file://" + str(Path(__file__).resolve().parents[1] / "blobs"),
        validation_alias="BLOB_BASE_URL",
    )
    blob_storage_options: dict = Field(default_factory=dict, validation_alias="BLOB_STORAGE_OPTIONS")
    blob_chunk_size_bytes: int = Field(
        default=261120,
        gt=0,
        validation_alias="BLOB_CHUNK_SIZE_BYTES",
        description="Bytes per stored chunk. 255 KiB, the GridFS default.",
    )

    # Uploads
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        validation_alias="MAX_UPLOAD_BYTES",
    )
    allowed_content_types: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_CONTENT_TYPES),
        validation_alias="ALLOWED_CONTENT_TYPES",
        description="Comma separated or JSON list. Empty allows every type.",
    )

    # Deletion
    strict_blob_deletion: bool = Field(
        default=False,
        validation_alias="STRICT_BLOB_DELETION",
        description="Abort a non-forced document delete when its content cannot be removed.",
    )

    # Notifications
    notification_backend: Literal["mongo", "kafka", "none"] = Field(
        default="mongo",
        validation_alias="NOTIFICATION_BACKEND",
    )
    kafka_bootstrap_servers: str = Field(
        default="localhost:19092",
        validation_alias="KAFKA_BOOTSTRAP_SERVERS",
    )
    kafka_topic: str = Field(default="docuvault_notifications", validation_alias="KAFKA_TOPIC")

    @field_validator("allowed_content_types", mode="before")
    @classmethod
    def _split_content_types(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


# Global settings instance
settings = Settings()
