import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
BASE_DIR = Path(__file__).parent
DOWNLOADS_DIR = Path(os.getenv("NOTERELAY_DOWNLOADS_DIR", BASE_DIR / "downloads"))

# Server
HOST = os.getenv("NOTERELAY_HOST", "127.0.0.1")
PORT = int(os.getenv("NOTERELAY_PORT", "8787"))

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

# Summarization
LLM_PROVIDER = os.getenv("NOTERELAY_LLM_PROVIDER", "openrouter")
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_URL = os.getenv("NOTERELAY_OPENROUTER_URL", "https://openrouter.ai/api/v1")
OPENROUTER_MODEL = os.getenv("NOTERELAY_OPENROUTER_MODEL", "mistralai/mistral-medium-3.1")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
ANTHROPIC_MODEL = os.getenv("NOTERELAY_ANTHROPIC_MODEL", "claude-sonnet-4-5-20250929")
SUMMARY_MAX_TOKENS = 2000
SUMMARY_TEMPERATURE = 0.3

# Transcription ("openai" = synchronous Whisper, "assemblyai" = upload + poll)
STT_PROVIDER = os.getenv("NOTERELAY_STT_PROVIDER", "openai")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_URL = os.getenv("NOTERELAY_OPENAI_URL", "https://api.openai.com/v1")
WHISPER_MODEL = os.getenv("NOTERELAY_WHISPER_MODEL", "whisper-1")
ASSEMBLYAI_API_KEY = os.getenv("ASSEMBLYAI_API_KEY", "")
ASSEMBLYAI_URL = os.getenv("NOTERELAY_ASSEMBLYAI_URL", "https://api.assemblyai.com/v2")
POLL_INTERVAL_SECS = float(os.getenv("NOTERELAY_POLL_INTERVAL", "2"))
# 0 disables the cap
POLL_MAX_ATTEMPTS = int(os.getenv("NOTERELAY_POLL_MAX_ATTEMPTS", "450"))

# Email
RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
RESEND_URL = os.getenv("NOTERELAY_RESEND_URL", "https://api.resend.com")
EMAIL_FROM = os.getenv("NOTERELAY_EMAIL_FROM", "Meeting Summarizer <onboarding@resend.dev>")

# Outbound HTTP
REQUEST_TIMEOUT_SECS = 300

# Client
SERVER_URL = os.getenv("NOTERELAY_SERVER_URL", f"http://{HOST}:{PORT}")
CLIENT_API_KEY = os.getenv("NOTERELAY_API_KEY", "")
NOTIFICATION_SECS = 5
DEFAULT_PROMPT = (
    "Summarize the key points and action items from this meeting "
    "in a clear, organized format."
)
