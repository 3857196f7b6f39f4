"""
Image Generation Client
=======================

Synchronous HTTP client for an OpenAI-style image generation API.

Processing flow:
    1. POST {model, prompt, n=1, size} with a bearer token.
    2. Read the first result's URL from the JSON response.
    3. GET the URL and return the raw image bytes.

Error handling strategy:
    - Transport failures and non-2xx statuses raise NetworkError
    - Malformed JSON or missing fields raise PayloadError
    - Both calls share one bounded timeout; there is no retry here,
      the worker's cadence is the retry policy
"""

import logging
from typing import Optional

import requests

from festive_frames.errors import NetworkError, PayloadError


logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.openai.com/v1/images/generations"


class ImageGenerationClient:
    """
    Client for generating and downloading a single image at a time.

    Attributes:
        endpoint: Generation endpoint URL
        model: Model name sent with each request
        size: Requested image size, e.g. "256x256"
        timeout: Seconds allowed for each HTTP call

    Example:
        client = ImageGenerationClient(api_key="sk-...")
        url = client.generate("a pixel art snowman")
        data = client.download(url)
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        model: str = "dall-e-2",
        size: str = "256x256",
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key must not be empty")

        self.endpoint = endpoint
        self.model = model
        self.size = size
        self.timeout = timeout
        self._api_key = api_key
        self._session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """
        Request one generated image.

        Args:
            prompt: Text prompt for generation

        Returns:
            URL of the generated image

        Raises:
            NetworkError: Transport failure or non-success status
            PayloadError: Response is not JSON or has no image URL
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "n": 1,
            "size": self.size,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            response = self._session.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"Generation request failed: {e}")

        if not response.ok:
            raise NetworkError(
                f"Generation request failed with status {response.status_code}: "
                f"{response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise PayloadError(f"Generation response is not JSON: {e}")

        try:
            url = body["data"][0]["url"]
        except (KeyError, IndexError, TypeError) as e:
            raise PayloadError(f"Generation response has no image URL: {e!r}")

        if not isinstance(url, str) or not url:
            raise PayloadError(f"Generation response has an invalid image URL: {url!r}")

        return url

    def download(self, url: str) -> bytes:
        """
        Fetch image bytes from a URL.

        Raises:
            NetworkError: Transport failure or non-success status
            PayloadError: Empty response body
        """
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"Image download failed: {e}")

        if not response.ok:
            raise NetworkError(f"Image download failed with status {response.status_code}")

        if not response.content:
            raise PayloadError("Image download returned an empty body")

        return response.content

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()
