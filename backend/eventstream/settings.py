from pathlib import Path
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent
ROOT_ENV = BASE_DIR.parent / ".env"


class StreamSettings(BaseSettings):
    log_level: str = "INFO"
    # Seconds of source inactivity before a heartbeat is sent; <= 0 disables
    heartbeat_interval_seconds: float = 15.0

    model_config: ConfigDict = ConfigDict(
        env_file=ROOT_ENV,
        extra="ignore"
    )


stream_settings: StreamSettings = StreamSettings()
