from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    catalog_file: str = "data/cards/sample_catalog.json"
    ledger_file: str = "data/ledger/spending.jsonl"
    exemplar_index_file: str = "data/rag/exemplar_index.json"
    log_level: str = "INFO"

    openai_api_key: str = ""
    openai_model: str = "gpt-4.1-mini"
    openai_embedding_model: str = "text-embedding-3-small"

    # Category cascade
    keyword_accept_confidence: float = 0.8
    semantic_below_confidence: float = 0.7
    llm_below_confidence: float = 0.6
    semantic_top_k: int = 10
    semantic_timeout_seconds: float = 3.0
    llm_timeout_seconds: float = 8.0
    classifier_workers: int = 4
    classification_cache_size: int = 1000
    llm_min_interval_seconds: float = 0.1
    llm_max_requests_per_minute: int = 50

    # Portfolio gaps
    gap_min_improvement: float = 1.0
    gap_medium_priority: float = 1.5
    gap_high_priority: float = 3.0
    gap_min_card_increment: float = 0.5
    gap_max_recommendations: int = 5
    market_rate_ceiling: float = 10.0
    gap_tracked_categories: list[str] = Field(
        default_factory=lambda: ["Dining", "Grocery", "Gas", "Travel", "Entertainment", "Online"]
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
