from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from carbontrack.config import DEFAULT_MODEL, Settings, load_settings
from carbontrack.errors import EmptyResponse, MalformedResponse, TransportError
from carbontrack.file_reader import is_accepted_mime_type
from carbontrack.report_schema import RESPONSE_SCHEMA, CarbonReport

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """
You are an expert Environmental Consultant. Analyze the provided document (report, bill, or declaration).

Tasks:
1. Identify the company name and the specific reporting period mentioned.
2. Extract total emissions in tCO2e. If only kg are provided, convert to metric tonnes.
3. Categorize all found emissions into:
   - Scope 1: Direct emissions (e.g., fuel combustion, company vehicles).
   - Scope 2: Indirect emissions (e.g., purchased electricity, heating).
   - Scope 3: Value chain emissions (e.g., travel, waste, supply chain).
   The three scope values must add up to the total emissions.
4. List at least 5 individual sources with their specific amounts and scope (1, 2 or 3).
5. Provide high-level strategic insights and actionable reduction recommendations.

Return the analysis strictly as JSON matching the provided schema.
""".strip()


def build_client(settings: Settings) -> genai.Client:
    """Create the Gemini client from the process-wide credential."""
    if not settings.api_key:
        raise TransportError("Gemini API key is not configured (set GEMINI_API_KEY).")
    return genai.Client(api_key=settings.api_key)


def build_request(file_b64: str, mime_type: str) -> tuple[list[types.Content], types.GenerateContentConfig]:
    """Assemble the inline document, the instruction and the strict output schema."""
    if not is_accepted_mime_type(mime_type):
        raise ValueError(f"Unsupported mime type for analysis: {mime_type!r}")

    try:
        raw = base64.b64decode(file_b64, validate=True)
    except (binascii.Error, TypeError) as exc:
        raise ValueError("File payload is not valid base64.") from exc

    contents = [
        types.Content(
            role="user",
            parts=[
                types.Part.from_bytes(data=raw, mime_type=mime_type),
                types.Part.from_text(text=EXTRACTION_PROMPT),
            ],
        )
    ]
    config = types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=RESPONSE_SCHEMA,
    )
    return contents, config


def parse_report(text: Optional[str]) -> CarbonReport:
    """Parse the model's JSON text into a report, rejecting anything off-schema."""
    if text is None or not text.strip():
        raise EmptyResponse("No analysis could be generated. Please ensure the document contains legible carbon data.")

    try:
        payload = json.loads(text.strip())
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse AI response: %s", text)
        raise MalformedResponse("Received invalid data format from the analysis engine.") from exc

    try:
        return CarbonReport.from_dict(payload)
    except ValueError as exc:
        logger.error("AI response does not match the report schema (%s): %s", exc, text)
        raise MalformedResponse(f"Analysis response does not match the report schema: {exc}") from exc


def analyze_carbon_report(
    file_b64: str,
    mime_type: str,
    client: Optional[genai.Client] = None,
    model: str = DEFAULT_MODEL,
    settings: Optional[Settings] = None,
) -> CarbonReport:
    """Send one document to Gemini and return the extracted carbon report.

    A single best-effort attempt: nothing is retried or cached. API and network
    failures surface as ``TransportError``; an empty reply as ``EmptyResponse``;
    invalid or off-schema JSON as ``MalformedResponse``.
    """
    contents, config = build_request(file_b64, mime_type)

    if client is None:
        client = build_client(settings or load_settings())

    logger.info("Requesting carbon analysis from %s (%s, %d bytes base64)", model, mime_type, len(file_b64))
    try:
        response = client.models.generate_content(model=model, contents=contents, config=config)
    except (genai_errors.APIError, httpx.HTTPError, OSError) as exc:
        raise TransportError(f"Gemini request failed: {exc}") from exc

    return parse_report(getattr(response, "text", None))
