import logging
import socket
import sys

import uvicorn

import config
from processing.mailer import Mailer
from processing.summarizer import Summarizer
from processing.transcriber import Transcriber
from server.app import create_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("noterelay")


def find_available_port(start: int, end: int) -> int:
    for port in range(start, end + 1):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((config.HOST, port))
                return port
            except OSError:
                continue
    raise RuntimeError(f"No free port between {start} and {end}")


def build_gateways() -> tuple[Transcriber, Summarizer, Mailer]:
    if config.LLM_PROVIDER == "anthropic":
        summarizer = Summarizer(
            provider="anthropic",
            api_key=config.ANTHROPIC_API_KEY,
            model=config.ANTHROPIC_MODEL,
        )
    else:
        summarizer = Summarizer(
            provider=config.LLM_PROVIDER,
            api_key=config.OPENROUTER_API_KEY,
            model=config.OPENROUTER_MODEL,
            base_url=config.OPENROUTER_URL,
        )

    if config.STT_PROVIDER == "assemblyai":
        transcriber = Transcriber(
            provider="assemblyai",
            api_key=config.ASSEMBLYAI_API_KEY,
            base_url=config.ASSEMBLYAI_URL,
        )
    else:
        transcriber = Transcriber(
            provider=config.STT_PROVIDER,
            api_key=config.OPENAI_API_KEY,
            base_url=config.OPENAI_URL,
            model=config.WHISPER_MODEL,
        )

    mailer = Mailer(api_key=config.RESEND_API_KEY, base_url=config.RESEND_URL,
                    sender=config.EMAIL_FROM)
    return transcriber, summarizer, mailer


def main():
    try:
        port = find_available_port(config.PORT, config.PORT + 13)
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    if port != config.PORT:
        logger.info("Port %d in use, using %d", config.PORT, port)
    config.PORT = port

    transcriber, summarizer, mailer = build_gateways()
    for name, gateway in (("summarization", summarizer), ("transcription", transcriber),
                          ("email", mailer)):
        if not gateway.is_configured:
            logger.warning("%s service is not configured; its endpoint will answer 500", name)

    app = create_app(transcriber, summarizer, mailer)

    logger.info("NoteRelay listening on http://%s:%d", config.HOST, config.PORT)
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level="warning")


if __name__ == "__main__":
    main()
