from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class SearchConfig:
    api_key: str = os.getenv("SERPER_API_KEY", "")
    endpoint: str = "https://google.serper.dev/search"
    timeout: float = 5.0
    num_results: int = 5
    query_suffix: str = "tutorial lecture notes"
    enabled: bool = True


DEFAULT_SEARCH_CONFIG = SearchConfig()
