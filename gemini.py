"""
Gemini answer provider.

Questions are forwarded verbatim; the model's text is returned as-is.
"""

from google import genai

from config import DEFAULT_MODEL, Credential, classify_credential
from errors import ConfigurationMissing, UpstreamCallFailure


class GeminiAnswerProvider:
    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, client=None):
        if client is None:
            if classify_credential(api_key) is Credential.ABSENT_OR_PLACEHOLDER:
                raise ConfigurationMissing("GEMINI_API_KEY is not set")
            client = genai.Client(api_key=api_key)
        self.model = model
        self._client = client

    async def answer(self, question: str) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=question,
            )
        except Exception as e:
            raise UpstreamCallFailure(str(e)) from e
        return response.text or ""
