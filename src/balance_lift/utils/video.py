"""Utilities for turning exercise video links into embeddable player URLs."""

import re
from urllib.parse import ParseResult, parse_qs, urlparse

VIMEO_EMBED_URL = "https://player.vimeo.com/video/{video_id}"
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"

# Path shapes on vimeo.com that end in a numeric video id
VIMEO_PATH_PATTERNS = [
    re.compile(r"^/(\d+)/?$"),
    re.compile(r"^/video/(\d+)/?$"),
    re.compile(r"^/channels/[^/]+/(\d+)/?$"),
    re.compile(r"^/groups/[^/]+/videos/(\d+)/?$"),
    re.compile(r"^/(\d+)/([0-9a-f]+)/?$"),  # unlisted: /<id>/<hash>
]
VIMEO_HASH = re.compile(r"^[0-9a-f]+$")

YOUTUBE_ID = re.compile(r"^[A-Za-z0-9_-]{6,}$")
YOUTUBE_PATH_PATTERNS = [
    re.compile(r"^/embed/([^/?#]+)"),
    re.compile(r"^/shorts/([^/?#]+)"),
    re.compile(r"^/live/([^/?#]+)"),
]


def _parse(url: str) -> tuple[str, ParseResult] | None:
    """Parse a URL, returning its lowercased host without www. and the parts."""
    candidate = url.strip()
    if not candidate:
        return None
    if "://" not in candidate:
        candidate = "https://" + candidate

    parsed = urlparse(candidate)
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host, parsed


def _query_value(parsed: ParseResult, name: str) -> str | None:
    return (parse_qs(parsed.query).get(name) or [None])[0]


def _match_vimeo(url: str) -> tuple[str, str | None] | None:
    """Match a Vimeo URL, returning (video id, unlisted hash or None)."""
    split = _parse(url)
    if split is None:
        return None
    host, parsed = split

    if host not in ("vimeo.com", "player.vimeo.com"):
        return None

    for pattern in VIMEO_PATH_PATTERNS:
        match = pattern.match(parsed.path or "/")
        if match:
            video_hash = match.group(2) if pattern.groups == 2 else _query_value(parsed, "h")
            if video_hash and not VIMEO_HASH.match(video_hash):
                video_hash = None
            return match.group(1), video_hash
    return None


def extract_vimeo_id(url: str) -> str | None:
    """Extract the numeric video id from a Vimeo URL."""
    match = _match_vimeo(url)
    return match[0] if match else None


def extract_vimeo_hash(url: str) -> str | None:
    """Extract the privacy hash an unlisted Vimeo video needs to play."""
    match = _match_vimeo(url)
    return match[1] if match else None


def extract_youtube_id(url: str) -> str | None:
    """Extract the video id from a YouTube URL."""
    split = _parse(url)
    if split is None:
        return None
    host, parsed = split
    path = parsed.path or "/"

    video_id = None
    if host == "youtu.be":
        video_id = path.strip("/").split("/")[0]
    elif host in ("youtube.com", "m.youtube.com", "youtube-nocookie.com"):
        if path.rstrip("/") == "/watch":
            video_id = _query_value(parsed, "v")
        else:
            for pattern in YOUTUBE_PATH_PATTERNS:
                match = pattern.match(path)
                if match:
                    video_id = match.group(1)
                    break

    if video_id and YOUTUBE_ID.match(video_id):
        return video_id
    return None


def get_embed_url(video_link: str | None) -> str | None:
    """Map a stored video link to an embeddable player URL.

    Unlisted Vimeo links keep their privacy hash as the ``h`` parameter.

    Args:
        video_link: The exercise's stored video URL

    Returns:
        The player URL, or None when the link is empty or its shape is
        not recognized
    """
    if not video_link:
        return None

    vimeo = _match_vimeo(video_link)
    if vimeo:
        video_id, video_hash = vimeo
        url = VIMEO_EMBED_URL.format(video_id=video_id)
        return f"{url}?h={video_hash}" if video_hash else url

    youtube_id = extract_youtube_id(video_link)
    if youtube_id:
        return YOUTUBE_EMBED_URL.format(video_id=youtube_id)

    return None
