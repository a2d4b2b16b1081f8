# roadmapai/agents/resources.py
import re
from urllib.parse import parse_qs, quote, urlsplit

from roadmapai.agents.schemas import RESOURCE_TYPES, Resource

MIN_RESOURCES_PER_TOPIC = 2

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def google_search_url(query: str) -> str:
    return f"https://www.google.com/search?q={quote(query, safe='')}"


def youtube_search_url(query: str) -> str:
    return f"https://www.youtube.com/results?search_query={quote(query, safe='')}"


def _is_youtube(host: str) -> bool:
    return host in ("youtu.be", "youtube.com") or host.endswith((".youtube.com", ".youtu.be"))


def _is_google(host: str) -> bool:
    return host in ("google.com", "www.google.com")


def _is_valid_absolute(url: str) -> bool:
    try:
        parts = urlsplit(url)
        parts.port  # raises on a malformed port
    except ValueError:
        return False
    if parts.scheme not in ("http", "https"):
        return False
    if not parts.hostname or any(ch.isspace() for ch in parts.netloc):
        return False
    return True


def normalize_url(url: str | None, title: str, resource_type: str = "other") -> str:
    """
    Return a usable absolute URL for a resource.

    Relative or scheme-less URLs get https://. YouTube links are replaced by a
    search for the title (model video IDs are not trusted). google.com links
    are canonicalised to /search?q=. Anything still invalid becomes a search
    URL keyed on the title.
    """
    url = (url or "").strip()
    if url and not _SCHEME.match(url):
        url = "https://" + url.lstrip("/")

    host = ""
    query = ""
    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
        query = parts.query
    except ValueError:
        pass

    if _is_youtube(host):
        return youtube_search_url(title)

    if _is_google(host):
        q = parse_qs(query).get("q")
        return google_search_url(q[0] if q and q[0].strip() else title)

    if _is_valid_absolute(url):
        return url

    if resource_type == "video":
        return youtube_search_url(title)
    return google_search_url(title)


def search_resources(query: str) -> list[Resource]:
    """Two search-link resources (article + video) for a free-text query."""
    return [
        Resource(type="doc", title=f"{query} - articles and tutorials", url=google_search_url(query)),
        Resource(type="video", title=f"{query} - video lessons", url=youtube_search_url(query)),
    ]


def coerce_resource(raw: object, fallback_title: str) -> Resource | None:
    if isinstance(raw, str):
        raw = {"url": raw}
    if not isinstance(raw, dict):
        return None

    rtype = str(raw.get("type") or "other").strip().lower()
    if rtype not in RESOURCE_TYPES:
        rtype = "other"
    title = str(raw.get("title") or "").strip() or fallback_title
    url = raw.get("url")
    return Resource(
        type=rtype,
        title=title,
        url=normalize_url(url if isinstance(url, str) else None, title, rtype),
    )


def normalize_resources(raw: object, topic_title: str, goal: str) -> list[Resource]:
    """Validate a topic's resources and top up to MIN_RESOURCES_PER_TOPIC."""
    items = raw if isinstance(raw, list) else []
    resources = [r for r in (coerce_resource(i, topic_title) for i in items) if r is not None]

    if len(resources) < MIN_RESOURCES_PER_TOPIC:
        existing = {r.url for r in resources}
        for extra in search_resources(f"{goal} {topic_title}"):
            if len(resources) >= MIN_RESOURCES_PER_TOPIC:
                break
            if extra.url not in existing:
                resources.append(extra)
    return resources
