"""Library settings."""

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

DEFAULT_PAGE_SIZE = 100
DEFAULT_DRIVER = 'mysql+aiomysql'
BACKUP_TIMESTAMP_FORMAT = '%Y-%m-%d_%H%M%S'


class DBTreeSettings(BaseSettings):
    """Settings loaded from DBTREE_* environment variables (or .env)."""

    default_page_size: int = DEFAULT_PAGE_SIZE
    driver: str = DEFAULT_DRIVER
    connect_timeout: int = 10
    log_level: str = 'INFO'
    dump_command: str = 'mysqldump'
    backup_timestamp_format: str = BACKUP_TIMESTAMP_FORMAT

    model_config = SettingsConfigDict(
        env_prefix='DBTREE_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )
