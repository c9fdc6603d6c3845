"""
SoundCloud track aggregation for streamgrab.

Turns a classified SoundCloud reference into playlist files:

    TRACK     -> "(Track) <title> - <uploader>"
    PLAYLIST  -> "(Playlist) <title> by <owner>"
    USER      -> "(Uploads) <username>"
                 + "(Favourites) <username>"  when include_favourites is set
                 + one "(Playlist) ..." file per set  when include_sets is set

Every track record is normalized through Track.from_soundcloud_api(), so
durations become whole seconds and stream URLs carry the client_id.

Error Handling:
    Failures fetching the requested resource itself propagate to the
    caller. When include_sets expands a user into their sets, each set is
    isolated: a failing set is logged, reported as a failed outcome, and
    the remaining sets are still written.
"""

from typing import Any

from streamgrab.core.config import UserConfig
from streamgrab.core.exceptions import StreamGrabError, UnknownResourceError
from streamgrab.core.logger import get_logger, log_resource_failure
from streamgrab.core.models import (
    Playlist,
    PlaylistOutcome,
    ResourceKind,
    ResourceReference,
    Track,
)
from streamgrab.core.playlist_writer import PlaylistWriter
from streamgrab.soundcloud.client import SoundcloudClient

logger = get_logger(__name__)


def tracks_from_api(
    records: list[dict[str, Any]],
    client_id: str,
    api_base: str
) -> tuple[Track, ...]:
    """
    Normalize a list of SoundCloud track records, keeping their order.

    Records wrapped as {"track": {...}} (as some like/favourite listings
    return them) are unwrapped. Entries that are not track objects are
    skipped.
    """
    tracks: list[Track] = []

    for record in records:
        if isinstance(record, dict) and isinstance(record.get("track"), dict):
            record = record["track"]
        if not isinstance(record, dict) or record.get("kind", "track") != "track":
            logger.debug(f"Skipping non-track entry: {record!r:.80}")
            continue
        tracks.append(Track.from_soundcloud_api(record, client_id, api_base))

    return tuple(tracks)


def _username(resource: dict[str, Any]) -> str:
    user = resource.get("user") or {}
    return user.get("username") or "Unknown"


class SoundcloudFetcher:
    """
    Aggregates SoundCloud resources into written playlists.

    Attributes:
        client: API client used for every fetch.
        writer: Destination for the playlists.
        options: Which extra playlists to produce for user profiles.
    """

    def __init__(
        self,
        client: SoundcloudClient,
        writer: PlaylistWriter,
        options: UserConfig | None = None
    ) -> None:
        self._client = client
        self._writer = writer
        self._options = options or UserConfig()

    def fetch(self, reference: ResourceReference) -> list[PlaylistOutcome]:
        """
        Aggregate a classified SoundCloud reference.

        Returns:
            Outcomes in the order their playlists were produced.

        Raises:
            UnknownResourceError: If the kind is not TRACK, PLAYLIST or USER.
            StreamGrabError: Any failure fetching the referenced resource.
        """
        if reference.kind is ResourceKind.TRACK:
            logger.debug("Track URL received")
            return [self.from_track(reference.id)]
        if reference.kind is ResourceKind.PLAYLIST:
            logger.debug("Playlist URL received")
            return [self.from_playlist(reference.id)]
        if reference.kind is ResourceKind.USER:
            logger.debug("User URL received")
            return self.from_user(reference.id)

        raise UnknownResourceError(
            f"Unknown SoundCloud resource: {reference.kind.value}",
            details={"url": reference.locator}
        )

    def _normalize(self, records: list[dict[str, Any]]) -> tuple[Track, ...]:
        return tracks_from_api(records, self._client.client_id, self._client.api_base)

    def from_track(self, track_id: int) -> PlaylistOutcome:
        """Write a one-track playlist for a single track."""
        track_data = self._client.track(track_id)

        label = f"(Track) {track_data.get('title', '')} - {_username(track_data)}"
        playlist = Playlist(label=label, tracks=self._normalize([track_data]))
        return self._writer.write(playlist, source=f"tracks/{track_id}")

    def from_playlist(self, playlist_id: int) -> PlaylistOutcome:
        """Write a set (playlist) with all its tracks in set order."""
        playlist_data = self._client.playlist(playlist_id)

        label = f"(Playlist) {playlist_data.get('title', '')} by {_username(playlist_data)}"
        tracks = self._normalize(playlist_data.get("tracks") or [])
        return self._writer.write(Playlist(label=label, tracks=tracks), source=f"playlists/{playlist_id}")

    def from_user(self, user_id: int) -> list[PlaylistOutcome]:
        """
        Write the playlists for a user profile.

        Order of outcomes:
            1. Favourites (if include_favourites)
            2. One per set (if include_sets), each isolated on failure
            3. Uploads

        Raises:
            StreamGrabError: If the uploads, profile or favourites cannot be
                             fetched, or the list of sets cannot be fetched.
        """
        tracks = self._client.user_tracks(user_id)
        user = self._client.user(user_id)
        username = user.get("username") or str(user_id)

        outcomes: list[PlaylistOutcome] = []

        if self._options.include_favourites:
            favourites = self._client.user_favorites(user_id)
            outcomes.append(self._writer.write(
                Playlist(label=f"(Favourites) {username}", tracks=self._normalize(favourites)),
                source=f"users/{user_id}/favorites"
            ))

        if self._options.include_sets:
            outcomes.extend(self._from_user_sets(user_id))

        outcomes.append(self._writer.write(
            Playlist(label=f"(Uploads) {username}", tracks=self._normalize(tracks)),
            source=f"users/{user_id}/tracks"
        ))
        return outcomes

    def _from_user_sets(self, user_id: int) -> list[PlaylistOutcome]:
        sets = self._client.user_playlists(user_id)
        logger.info(f"Found {len(sets)} sets for user {user_id}")

        outcomes: list[PlaylistOutcome] = []
        for i, set_ref in enumerate(sets, 1):
            set_id = set_ref.get("id")
            source = f"playlists/{set_id}"
            logger.debug(f"[{i}/{len(sets)}] Set: {set_ref.get('title', set_id)}")

            try:
                outcomes.append(self.from_playlist(set_id))
            except StreamGrabError as e:
                log_resource_failure(logger, source, e)
                outcomes.append(PlaylistOutcome.from_error(source, e))

        return outcomes
