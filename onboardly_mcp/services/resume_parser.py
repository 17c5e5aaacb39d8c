"""Resume parsing.

Downloads a resume, extracts its text with pypdf and asks Gemini to turn it
into a ``ResumeParseResult``. Every failure is reported through
``ErrorMessage``; ``parse_resume`` never raises.
"""

import asyncio
import io
import json
import logging
import re

import httpx
from pypdf import PdfReader

from ..config import Settings, settings as default_settings
from ..models import ResumeParseResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert resume parser. Given the raw text of a resume, extract and return the following fields in strict JSON format. Use null or empty arrays/objects if data is missing. Only return the JSON object, no extra text. Example format:
{
  "LinkedInUrl": "https://linkedin.com/in/example",
  "GithubUrl": "https://github.com/example",
  "MajorTechnologies": ["Python", "FastAPI", "PostgreSQL"],
  "MajorProjects": { "Project A": "High", "Project B": "Medium" },
  "MajorCertifications": ["Certification 1", "Certification 2"],
  "ErrorMessage": null
}"""

# Models often wrap JSON in a fenced block
_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
_FENCED_ANY = re.compile(r"```\s*([\s\S]*?)\s*```")


def extract_pdf_text(data: bytes) -> str:
    """Concatenate the text of every page."""
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def extract_json_text(text: str) -> str:
    match = _FENCED_JSON.search(text) or _FENCED_ANY.search(text)
    return (match.group(1) if match else text).strip()


def parse_llm_output(text: str) -> ResumeParseResult:
    """Build a result from the model's reply.

    Raises:
        ValueError: The reply is not a JSON object of the expected shape
    """
    parsed = json.loads(extract_json_text(text))
    if not isinstance(parsed, dict):
        raise ValueError("LLM response is not a JSON object")

    # Explicit nulls fall back to empty values
    return ResumeParseResult(
        linkedin_url=parsed.get("LinkedInUrl"),
        github_url=parsed.get("GithubUrl"),
        major_technologies=parsed.get("MajorTechnologies") or [],
        major_projects=parsed.get("MajorProjects") or {},
        major_certifications=parsed.get("MajorCertifications") or [],
        error_message=parsed.get("ErrorMessage"),
    )


def is_pdf(url: str, content_type: str | None) -> bool:
    return "application/pdf" in (content_type or "") or url.lower().endswith(".pdf")


class ResumeParserService:
    """Extracts structured candidate data from resume PDFs."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.http_timeout_seconds,
            transport=self._transport,
            follow_redirects=True,
        )

    async def parse_resume(self, resume_url: str | None) -> ResumeParseResult:
        if not resume_url or not resume_url.strip():
            return ResumeParseResult.failure("Resume URL cannot be empty.")

        try:
            async with self._client() as client:
                response = await client.get(resume_url)
                response.raise_for_status()

                content_type = response.headers.get("content-type")
                if not is_pdf(resume_url, content_type):
                    return ResumeParseResult.failure(
                        f"Unsupported file type: {content_type or 'unknown'}. "
                        "Only PDF resumes are supported currently."
                    )

                resume_text = await asyncio.to_thread(extract_pdf_text, response.content)

                if not self.settings.gemini_api_key:
                    return ResumeParseResult.failure("Gemini API key not configured.")

                text = await self._generate(client, resume_text)

            if not text:
                return ResumeParseResult.failure("Empty response from Gemini.")

            try:
                return parse_llm_output(text)
            except ValueError as e:
                # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
                logger.warning(f"Failed to parse LLM response for {resume_url}: {e}")
                return ResumeParseResult.failure("Failed to parse LLM response.")

        except Exception as e:
            logger.error(f"Error parsing resume {resume_url}: {e}", exc_info=True)
            return ResumeParseResult.failure(f"Error parsing resume: {e}")

    async def _generate(self, client: httpx.AsyncClient, resume_text: str) -> str:
        """Call Gemini generateContent and return the first candidate's text."""
        url = f"{self.settings.gemini_base_url}/models/{self.settings.gemini_model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": f"{SYSTEM_PROMPT}\n\nResume Text:\n{resume_text}"}]}],
            "generationConfig": {"temperature": 0.1, "maxOutputTokens": 4096},
        }

        response = await client.post(
            url,
            params={"key": self.settings.gemini_api_key},
            json=payload,
        )
        response.raise_for_status()
        data = response.json()

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            return ""
