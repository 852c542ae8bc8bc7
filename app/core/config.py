from pydantic_settings import BaseSettings
from dotenv import load_dotenv


load_dotenv()


STORAGE_BACKENDS = ("sql", "memory")


class Settings(BaseSettings):
    app_name: str = "Certificate Verification API"
    debug: bool = False
    database_url: str = "sqlite:///./certificates.db"
    storage_backend: str = "sql"
    host: str = "127.0.0.1"
    port: int = 8000
    allowed_hosts: str = ""
    log_file: str = "logs/application.log"
    extraction_url: str = ""
    extraction_api_key: str = ""
    extraction_timeout: float = 30.0
    default_page_size: int = 10
    max_page_size: int = 100


settings = Settings()

if settings.storage_backend not in STORAGE_BACKENDS:
    raise RuntimeError(
        f"Unknown storage backend '{settings.storage_backend}'. "
        f"Expected one of: {', '.join(STORAGE_BACKENDS)}.")
