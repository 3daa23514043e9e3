from typing import List, Optional

import httpx

from cricket_scores.core.config import settings
from cricket_scores.fetch.base import ScoreSource
from cricket_scores.fetch.parsing import decode_json, parse_score_payload
from cricket_scores.schemas import ScoreRecord

def build_headers(user_agent: str) -> dict:
    return {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Cache-Control": "no-cache, no-store, must-revalidate",
        "Pragma": "no-cache",
        "User-Agent": user_agent,
    }

class HttpScoreSource(ScoreSource):
    """
    Scores served as a JSON array of [country, score] pairs.

    Errors are left to propagate: httpx.HTTPStatusError for non-2xx,
    httpx.TransportError for connection failures, ScorePayloadError for bad bodies.
    The per-attempt deadline is enforced by the caller, so the client has no timeout.
    """
    name = "server"

    def __init__(
        self,
        url: Optional[str] = None,
        user_agent: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url or settings.SCORES_API_URL
        self.user_agent = user_agent or settings.USER_AGENT
        self._client = client

    async def fetch(self) -> List[ScoreRecord]:
        headers = build_headers(self.user_agent)

        if self._client is not None:
            response = await self._client.get(self.url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=None, follow_redirects=True) as client:
                response = await client.get(self.url, headers=headers)

        response.raise_for_status()
        return parse_score_payload(decode_json(response.text))
