from pydantic_settings import BaseSettings, SettingsConfigDict


class ChatSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHAT_",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # Upper bound on the identity lookup during the handshake (seconds).
    USER_LOOKUP_TIMEOUT: float = 5.0
    # Display name for users without a name on record.
    ANONYMOUS_NAME: str = "Anonymous"


config = ChatSettings()
