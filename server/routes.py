import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import Response

import config
from processing.errors import GatewayError, MissingInput
from processing.mailer import Mailer
from processing.models import EmailRequest, EmailResponse, SummarizeRequest, SummarizeResponse
from processing.summarizer import Summarizer
from processing.transcriber import Transcriber

logger = logging.getLogger(__name__)

ENDPOINTS = ("/summarize", "/send-email", "/voice-to-text")


def _gateway_failure(e: GatewayError) -> HTTPException:
    return HTTPException(e.status_code, e.message, headers=config.CORS_HEADERS)


def create_router(transcriber: Transcriber, summarizer: Summarizer,
                  mailer: Mailer) -> APIRouter:
    router = APIRouter()

    # -- Preflight --

    def preflight():
        return Response(status_code=200, headers=config.CORS_HEADERS)

    for path in ENDPOINTS:
        router.add_api_route(path, preflight, methods=["OPTIONS"], include_in_schema=False)

    # -- Status --

    @router.get("/status")
    def get_status():
        return {
            "summarization": {
                "provider": summarizer.provider,
                "configured": summarizer.is_configured,
            },
            "transcription": {
                "provider": transcriber.provider,
                "configured": transcriber.is_configured,
            },
            "email": {"configured": mailer.is_configured},
        }

    # -- Gateways --

    @router.post("/summarize", response_model=SummarizeResponse)
    def summarize(body: SummarizeRequest):
        try:
            summary = summarizer.summarize(body.transcript, body.prompt)
        except GatewayError as e:
            logger.error("Error in summarize: %s", e)
            raise _gateway_failure(e)
        return SummarizeResponse(summary=summary)

    @router.post("/send-email", response_model=EmailResponse)
    def send_email(body: EmailRequest):
        try:
            mailer.send(body)
        except GatewayError as e:
            logger.error("Error in send-email: %s", e)
            raise _gateway_failure(e)
        return EmailResponse(success=True, message="Email sent")

    @router.post("/voice-to-text")
    def voice_to_text(audio: UploadFile | None = File(None)):
        try:
            if audio is None:
                raise MissingInput("No audio file provided")
            data = audio.file.read()
            result = transcriber.transcribe(data, audio.filename or "audio")
        except GatewayError as e:
            logger.error("Error in voice-to-text: %s", e)
            raise _gateway_failure(e)
        return result.model_dump()

    return router
