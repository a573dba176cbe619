"""Answer service for asking questions about an uploaded transcript via Gemini."""

import httpx

from src.utils.logging import get_logger

from .config import VideoQAConfig
from .errors import NoAnswerError, Stage
from .http import parse_model, request_json
from .schemas import (
    ArtifactReference,
    GeminiContent,
    GeminiFileDataRef,
    GeminiGenerateRequest,
    GeminiGenerateResponse,
    GeminiPart,
)

logger = get_logger(__name__)

SERVICE_NAME = "Gemini generate"

QUESTION_PROMPT = (
    "Based on the content of this video transcript, please answer the following "
    "question: {question}\n\n"
    "Provide a detailed and accurate answer based solely on the information in the "
    "transcript."
)


def build_generate_request(
    artifact_ref: ArtifactReference, question: str
) -> GeminiGenerateRequest:
    """Build a single user message: the instruction first, then the file reference."""
    return GeminiGenerateRequest(
        contents=[
            GeminiContent(
                role="user",
                parts=[
                    GeminiPart(text=QUESTION_PROMPT.format(question=question)),
                    GeminiPart(
                        file_data=GeminiFileDataRef(
                            file_uri=artifact_ref, mime_type="text/plain"
                        )
                    ),
                ],
            )
        ]
    )


class AnswerService:
    """Service that answers a question from an uploaded transcript."""

    def __init__(self, config: VideoQAConfig, client: httpx.AsyncClient):
        self.config = config
        self.client = client
        logger.info("answer_service_initialized", model=config.gemini_model)

    async def ask(self, artifact_ref: ArtifactReference, question: str) -> str:
        """Ask a question against an uploaded transcript.

        Args:
            artifact_ref: File URI returned by the upload service.
            question: Natural-language question, embedded verbatim in the prompt.

        Returns:
            Answer text from the first part of the first candidate.

        Raises:
            NoAnswerError: If the response has no candidate, part or text.
            VideoQAError: If the request fails or the response is malformed.
        """
        logger.info(
            "asking_question", artifact_ref=artifact_ref, question_length=len(question)
        )

        request = build_generate_request(artifact_ref, question)
        payload = await request_json(
            self.client,
            "POST",
            (
                f"{self.config.gemini_base_url.rstrip('/')}/v1beta/models/"
                f"{self.config.gemini_model}:generateContent"
            ),
            params={"key": self.config.gemini_api_key},
            json=request.model_dump(exclude_none=True),
            service=SERVICE_NAME,
            stage=Stage.GENERATE,
        )
        response = parse_model(
            GeminiGenerateResponse, payload, service=SERVICE_NAME, stage=Stage.GENERATE
        )

        answer = response.first_text()
        if answer is None:
            logger.warning("answer_missing", artifact_ref=artifact_ref)
            raise NoAnswerError()

        logger.info("answer_generated", answer_length=len(answer))
        return answer
