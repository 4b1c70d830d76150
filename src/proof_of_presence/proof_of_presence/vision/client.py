from __future__ import annotations

import base64
from typing import Optional, Protocol, Sequence

import requests

from ..core.exceptions import CollaboratorUnavailable

DEFAULT_VISION_URL = "https://vision.googleapis.com/v1/images:annotate"

FACE_FEATURES = (("FACE_DETECTION", 10), ("LABEL_DETECTION", 5))
MULTI_FACE_FEATURES = (("FACE_DETECTION", 20),)


class VisionClient(Protocol):
    def annotate(self, image: bytes, features: Sequence[tuple[str, int]]) -> dict:
        """Return the first entry of the annotate response."""

        raise NotImplementedError


class GoogleVisionClient(VisionClient):
    """Google Cloud Vision REST client (API key auth)."""

    def __init__(
        self,
        api_key: str,
        *,
        url: str = DEFAULT_VISION_URL,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ):
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._http = http or requests.Session()

    def annotate(self, image: bytes, features: Sequence[tuple[str, int]]) -> dict:
        body = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image).decode("ascii")},
                    "features": [{"type": t, "maxResults": n} for t, n in features],
                }
            ]
        }
        try:
            resp = self._http.post(self._url, params={"key": self._api_key}, json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            raise CollaboratorUnavailable(f"Vision API unreachable: {exc}") from exc

        if not resp.ok:
            try:
                message = resp.json().get("error", {}).get("message", "Unknown error")
            except ValueError:
                message = resp.text[:200]
            raise CollaboratorUnavailable(f"Vision API error: {resp.status_code} - {message}")

        responses = resp.json().get("responses") or []
        if not responses:
            raise CollaboratorUnavailable("No response from Vision API")
        return responses[0]
