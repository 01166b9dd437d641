# nwi/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "National Walkability Index API"
    DATABASE_URL: str
    DB_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # Census Geocoder (address -> census block)
    GEOCODER_URL: str = "https://geocoding.geo.census.gov/geocoder/geographies/onelineaddress"
    GEOCODER_BENCHMARK: str = "2020"
    GEOCODER_VINTAGE: str = "Census2010_Census2020"
    GEOCODER_TIMEOUT: float = 10.0

    # Ingestion (extracts are read from DATA_DIR)
    INGEST_BATCH_SIZE: int = 500
    DATA_DIR: str = "data"
    TRACT_FILE: str = "Natl_WI.csv"
    CBSA_TRANSIT_FILE: str = "CBSA_Public_Transit_Usage.csv"
    CBSA_BIKE_FILE: str = "CBSA_Bicylce_Ridership.csv"
    ZIPCODE_FILE: str = "zip07_cbsa06.csv"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

settings = Settings()
