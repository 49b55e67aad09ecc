"""Configuration management for the medical chat assistant backend."""
import os
import logging
from dataclasses import dataclass, field
from typing import List, Dict, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:5173,http://localhost:3000"
).split(",")

# Model Configuration
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_API_BASE_URL = os.getenv(
    "GEMINI_API_BASE_URL",
    "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "30"))

# Pharmacy backend
PHARMACY_API_URL = os.getenv("PHARMACY_API_URL", "http://localhost:4000/api/pharmacies")
PHARMACY_TIMEOUT_SECONDS = float(os.getenv("PHARMACY_TIMEOUT_SECONDS", "10"))

# Chat sessions
SESSION_IDLE_TTL_SECONDS = float(os.getenv("SESSION_IDLE_TTL_SECONDS", "1800"))

# Chat behaviour
SYSTEM_PROMPT = """
You are an AI assistant specialized in providing information ONLY on medical and health-related topics.
Your knowledge covers symptoms, diseases, treatments, medications, general wellness, nutrition, and basic medical terminology.
Answer only questions directly related to these medical topics.
If a user asks a question outside of the medical and health domain (e.g., about history, programming, general knowledge, opinions, etc.), you MUST politely refuse to answer.
When refusing, state clearly that your function is limited to medical queries. For example, say: "I specialize in medical and health topics. I cannot answer questions outside of that scope. How can I help you with a health-related query?"
Do not engage in conversations unrelated to health. Be concise and informative in your medical answers.
Do not provide medical advice, diagnosis, or treatment recommendations. Always advise users to consult with a qualified healthcare professional for personal health concerns.
"""

GREETING_MESSAGE = (
    "Hello! I'm a medical information assistant. Ask me about health topics, "
    "symptoms, or general wellness. Remember to consult a doctor for personal advice."
)

DEFAULT_SAFETY_SETTINGS: List[Dict[str, str]] = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


@dataclass(frozen=True)
class GeminiConfig:
    """Everything the gateway needs to reach the generative-language endpoint."""
    api_key: str
    model: str = "gemini-2.0-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = 30.0
    safety_settings: List[Dict[str, str]] = field(
        default_factory=lambda: [dict(s) for s in DEFAULT_SAFETY_SETTINGS]
    )

    @property
    def endpoint_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


def load_gemini_config(api_key: Optional[str] = None) -> GeminiConfig:
    """
    Build the gateway configuration from the environment.

    Args:
        api_key: Overrides GEMINI_API_KEY when given

    Returns:
        GeminiConfig populated from environment defaults

    Raises:
        ValueError: If no API key is available
    """
    key = api_key or GEMINI_API_KEY
    if not key:
        raise ValueError("GEMINI_API_KEY must be provided or set in environment")

    return GeminiConfig(
        api_key=key,
        model=GEMINI_MODEL,
        base_url=GEMINI_API_BASE_URL,
        timeout_seconds=GEMINI_TIMEOUT_SECONDS,
    )


# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
