"""
TFTSight MetaTFT Integration

Byte source for tracker snapshots. The MetaTFT overlay uploads one snapshot
per tracked game; the public profile lookup lists those games
("app_matches") and the snapshot itself lives in object storage under the
tracker uuid. Bytes are returned as stored (gzip or plain); decoding is the
tracker pipeline's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

from tftsight.core.config import IntegrationConfig
from tftsight.core.constants import strip_match_prefix
from tftsight.core.errors import NotFoundError, SourceError

logger = logging.getLogger(__name__)

NO_TRACKER_TIP = (
    "Tracker data is only available for games played with the MetaTFT overlay/tracker running."
)


@dataclass
class AppMatch:
    """A game recorded by the overlay."""

    uuid: str
    match_id: str  # numeric part of the Riot match id
    created_timestamp: int = 0  # epoch milliseconds

    @property
    def created_at(self) -> str:
        if not self.created_timestamp:
            return ""
        moment = datetime.fromtimestamp(self.created_timestamp / 1000, tz=timezone.utc)
        return moment.isoformat()


class MetaTFTClient:
    """
    Client for the MetaTFT profile API and snapshot storage.

    Example:
        >>> client = MetaTFTClient(game_name="Player", tag_line="EUW")
        >>> raw = client.fetch_tracker_bytes("EUW1_7412345678")
    """

    def __init__(
        self,
        game_name: str,
        tag_line: str,
        config: IntegrationConfig | None = None,
        session=None,
        max_available_matches: int = 10,
    ):
        self.game_name = game_name
        self.tag_line = tag_line
        self.config = config or IntegrationConfig()
        self.max_available_matches = max_available_matches
        self._session = session

    def _get_session(self):
        """Get or create requests session."""
        if self._session is None:
            import requests

            self._session = requests.Session()
            self._session.headers.update({"User-Agent": self.config.user_agent})
        return self._session

    def _get(self, url: str, **kwargs: Any):
        session = self._get_session()
        try:
            response = session.get(url, timeout=self.config.timeout_seconds, **kwargs)
            response.raise_for_status()
        except Exception as e:
            logger.error(f"MetaTFT request failed: {url}: {e}")
            raise SourceError(f"MetaTFT request failed: {e}", url=url) from e
        return response

    def profile_url(self) -> str:
        platform = self.config.platform.upper()
        return (
            f"{self.config.metatft_api_base}/public/profile/lookup_by_riotid/"
            f"{platform}/{quote(self.game_name, safe='')}/{quote(self.tag_line, safe='')}"
            f"?source=full_profile&tft_set={self.config.tft_set}"
        )

    def snapshot_url(self, tracker_uuid: str) -> str:
        return f"{self.config.snapshot_base}/{tracker_uuid}.json"

    def get_app_matches(self) -> list[AppMatch]:
        """Games recorded by the overlay for this player, as listed by the profile lookup."""
        response = self._get(self.profile_url(), headers={"Accept": "application/json"})
        try:
            data = response.json()
        except ValueError as e:
            raise SourceError(f"MetaTFT profile response is not JSON: {e}") from e

        matches = []
        for item in (data or {}).get("app_matches") or []:
            if not isinstance(item, dict) or not item.get("uuid"):
                continue
            matches.append(
                AppMatch(
                    uuid=str(item["uuid"]),
                    match_id=str(item.get("match_id_ow", "")),
                    created_timestamp=int(item.get("created_timestamp") or 0),
                )
            )
        logger.debug(f"Profile lookup returned {len(matches)} tracked matches")
        return matches

    def find_app_match(self, match_id: str) -> AppMatch:
        """
        Find the tracked game for a Riot match id.

        Raises:
            NotFoundError: If the overlay recorded no games, or not this one
        """
        matches = self.get_app_matches()
        if not matches:
            raise NotFoundError(
                "No tracker data available. "
                "The MetaTFT tracker was not active during any recent games.",
                tip=NO_TRACKER_TIP,
            )

        match_number = strip_match_prefix(match_id)
        for app_match in matches:
            if app_match.match_id == match_number:
                return app_match

        raise NotFoundError(
            f"No tracker data for match {match_id}",
            reason="The MetaTFT tracker was not active during this game.",
            available_matches=[
                {"matchId": m.match_id, "date": m.created_at}
                for m in matches[: self.max_available_matches]
            ],
        )

    def fetch_snapshot(self, tracker_uuid: str) -> bytes:
        """Raw snapshot bytes for a tracker uuid."""
        response = self._get(self.snapshot_url(tracker_uuid), headers={"Accept-Encoding": "gzip"})
        content = response.content
        logger.info(f"Fetched tracker snapshot {tracker_uuid} ({len(content)} bytes)")
        return content

    def fetch_tracker_bytes(self, match_id: str) -> tuple[AppMatch, bytes]:
        """
        Locate and download the snapshot for a match.

        Returns:
            (AppMatch, raw snapshot bytes)

        Raises:
            NotFoundError: If no snapshot exists for the match
            SourceError: If an HTTP request fails
        """
        app_match = self.find_app_match(match_id)
        return app_match, self.fetch_snapshot(app_match.uuid)
