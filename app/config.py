from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # ---- Environment ----
    ENV: str = Field(default="development", env="ENV")

    # ---- LLM (upstream extraction) ----
    # Empty key disables the LLM call; the regex fallback still runs.
    GROQ_API_KEY: str = Field(default="", env="GROQ_API_KEY")
    GROQ_MODEL_NAME: str = Field(default="llama-3.1-8b-instant", env="GROQ_MODEL_NAME")
    GROQ_TEMPERATURE: float = Field(default=0.0, env="GROQ_TEMPERATURE")
    GROQ_MAX_TOKENS: int = Field(default=512, env="GROQ_MAX_TOKENS")
    GROQ_TOP_P: float = Field(default=1.0, env="GROQ_TOP_P")

    # ---- LLM Runtime ----
    LLM_REQUEST_TIMEOUT: int = Field(default=8, env="LLM_REQUEST_TIMEOUT")
    LLM_MAX_RETRIES: int = Field(default=2, env="LLM_MAX_RETRIES")
    EXTRACTION_TIMEOUT: float = Field(default=20.0, env="EXTRACTION_TIMEOUT")

    # ---- STT ----
    WHISPER_MODEL: str = Field(default="small", env="WHISPER_MODEL")
    WHISPER_LANGUAGE: str = Field(default="hi", env="WHISPER_LANGUAGE")
    WHISPER_COMPUTE_TYPE: str = Field(default="int8", env="WHISPER_COMPUTE_TYPE")
    STT_SAMPLE_RATE: int = Field(default=16000, env="STT_SAMPLE_RATE")
    STT_PRELOAD: bool = Field(default=True, env="STT_PRELOAD")

    # ---- Normalization / Validation profile ----
    TIMEZONE: str = Field(default="Asia/Kolkata", env="TIMEZONE")
    REQUIRE_MOBILE: bool = Field(default=False, env="REQUIRE_MOBILE")
    DATE_HORIZON_DAYS: int = Field(default=365, env="DATE_HORIZON_DAYS")
    MIN_MEETING_MINUTES: int = Field(default=15, env="MIN_MEETING_MINUTES")
    MAX_MEETING_HOURS: int = Field(default=12, env="MAX_MEETING_HOURS")
    RESPONSE_CONFIDENCE: float = Field(default=0.95, env="RESPONSE_CONFIDENCE")

    # ---- App / Deployment ----
    APP_HOST: str = Field(default="0.0.0.0", env="APP_HOST")
    APP_PORT: int = Field(default=8000, env="APP_PORT")
    DEBUG: bool = Field(default=True, env="DEBUG")

    # ---- Logging ----
    LOG_LEVEL: str = Field(default="INFO", env="LOG_LEVEL")
    LOG_FILE_PATH: str = Field(default="app.log", env="LOG_FILE_PATH")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
