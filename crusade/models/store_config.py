from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    campaign_key: str = Field(default="crusade:campaign", alias="CAMPAIGN_KEY")
    campaign_file: str = Field(default="crusade_campaign.json", alias="CAMPAIGN_FILE")


STORE_SETTINGS = StoreSettings()
