from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "JobTalk"
    debug: bool = True
    log_level: str = "INFO"

    # CORS
    frontend_url: str = "http://localhost:5173"

    # CareerNet job catalog
    career_api_base_url: str = "https://www.career.go.kr/cnet/front/openapi"
    career_net_api_key: Optional[str] = None

    # Q-Net national qualification list
    qualification_api_base_url: str = (
        "http://openapi.q-net.or.kr/openapi/service/rest/InquiryListNationalQualificationSVC"
    )
    qualification_api_key: Optional[str] = None
    qualification_sync_on_startup: bool = True

    # Outbound HTTP
    http_timeout_seconds: float = 15.0

    # LLM (server defaults; a request may override the key via headers)
    llm_provider: str = "openai"
    llm_model_key: str = "gpt-4o-mini"
    openai_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None

    # Pipeline policy
    catalog_batch_size: int = 5
    roadmap_max_attempts: int = 3
    roadmap_min_nodes: int = 50
    roadmap_max_nodes: int = 80
    roadmap_cache_size: int = 500

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()


# ── Model Registry ──────────────────────────────────────────────────────────

MODELS = {
    "openai": {
        "gpt-4o-mini": {
            "name": "GPT-4o mini",
            "model_id": "openai/gpt-4o-mini",
            "description": "Fast counselor chat and node details",
            "recommended": True,
        },
        "gpt-4o": {
            "name": "GPT-4o",
            "model_id": "openai/gpt-4o",
            "description": "Most reliable large roadmap JSON",
            "recommended": False,
        },
    },
    "groq": {
        "llama-3.3-70b": {
            "name": "LLaMA 3.3 70B",
            "model_id": "groq/llama-3.3-70b-versatile",
            "description": "Open-weights fallback",
            "recommended": True,
        },
    },
}

# ── Prompt Configuration ────────────────────────────────────────────────────

PROMPT_CONFIG = {
    "career_mentor": {"temperature": 0.7, "max_tokens": 1500},
    "conversation_summary": {"temperature": 0.3, "max_tokens": 500},
    "roadmap_generator": {"temperature": 0.4, "max_tokens": 8000},
    "node_detail": {"temperature": 0.5, "max_tokens": 1500},
}
