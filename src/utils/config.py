# runtime settings, read once from the environment
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DB_PATH = "data/store.sqlite"
OWNER_PASSPHRASE = "GLJI"
SEED_SIZE = 100


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """
    Values the storefront needs at startup.

    Fields:
      - db_path: sqlite file backing both storage scopes
      - owner_passphrase: shared secret for the owner dashboard
      - seed_size: number of placeholder products on first run
      - legacy_product_ids: assign new product ids by catalog length
      - debug: log at DEBUG level
      - log_file: write logs here instead of stderr
    """

    db_path: str = DB_PATH
    owner_passphrase: str = OWNER_PASSPHRASE
    seed_size: int = SEED_SIZE
    legacy_product_ids: bool = False
    debug: bool = False
    log_file: Optional[str] = None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    try:
        seed_size = int(env.get("ATELIER_SEED_SIZE", SEED_SIZE))
    except ValueError:
        seed_size = SEED_SIZE
    return Settings(
        db_path=env.get("ATELIER_DB_PATH", DB_PATH),
        owner_passphrase=env.get("ATELIER_OWNER_PASSPHRASE", OWNER_PASSPHRASE),
        seed_size=max(seed_size, 0),
        legacy_product_ids=_flag(env.get("ATELIER_LEGACY_PRODUCT_IDS")),
        debug=_flag(env.get("DEBUG")),
        log_file=env.get("ATELIER_LOG_FILE") or None,
    )
