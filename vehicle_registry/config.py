# vehicle_registry/config.py
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://data.gov.il/api/3/action/datastore_search"
# רכבים פרטיים ומסחריים - 4M+ רשומות, מתעדכן יומית
DEFAULT_RESOURCE_ID = "053cea08-09bc-40ec-8f7a-156f0677aff3"
# פרטים מורחבים: קודי צמיגים, קודי דגם, וו גרירה
DEFAULT_EXTENDED_RESOURCE_ID = "0866573c-40cd-4ca8-91d2-9dd2d7a492e5"
DEFAULT_TIMEOUT_MS = 10_000
DEFAULT_UA = "VehicleRegistry/1.0"


@dataclass(frozen=True)
class RegistryConfig:
    base_url: str = DEFAULT_BASE_URL
    resource_id: str = DEFAULT_RESOURCE_ID
    extended_resource_id: str = DEFAULT_EXTENDED_RESOURCE_ID
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    user_agent: str = DEFAULT_UA

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """
        Reads GOV_IL_* variables (a local .env file is loaded first).
        Unset variables keep their defaults.
        """
        load_dotenv()
        timeout_raw = os.getenv("GOV_IL_TIMEOUT_MS")
        try:
            timeout_ms = int(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_MS
        except ValueError as e:
            raise ValueError(f"GOV_IL_TIMEOUT_MS must be an integer, got {timeout_raw!r}") from e

        return cls(
            base_url=os.getenv("GOV_IL_BASE_URL", DEFAULT_BASE_URL),
            resource_id=os.getenv("GOV_IL_RESOURCE_ID", DEFAULT_RESOURCE_ID),
            extended_resource_id=os.getenv("GOV_IL_EXTENDED_RESOURCE_ID", DEFAULT_EXTENDED_RESOURCE_ID),
            timeout_ms=timeout_ms,
            user_agent=os.getenv("GOV_IL_USER_AGENT", DEFAULT_UA),
        )
