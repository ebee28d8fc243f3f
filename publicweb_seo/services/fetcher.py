from urllib.parse import urljoin, urlparse

import httpx

MAX_CONTENT_SIZE = 2 * 1024 * 1024  # 2 MB, an index.html is a few KB
TIMEOUT = 3.0  # seconds
MAX_REDIRECTS = 5
ALLOWED_SCHEMES = {"http", "https"}
USER_AGENT = "seo-renderer"


def _validate_url(url: str) -> None:
    """Raise ValueError if *url* is not an absolute http(s) URL."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not parsed.hostname:
        raise ValueError("URL must have a valid hostname.")


async def fetch_text(url: str, timeout: float = TIMEOUT) -> str:
    """Fetch *url* and return the response body as a string.

    Redirects are followed manually so that every hop is validated and counted.

    Raises:
        ValueError: if the URL is not an absolute http(s) URL.
        httpx.HTTPError: on network, timeout, or HTTP status errors.
        RuntimeError: if the body exceeds MAX_CONTENT_SIZE or redirects loop.
    """
    _validate_url(url)

    current_url = url
    headers = {"user-agent": USER_AGENT}
    async with httpx.AsyncClient(follow_redirects=False, timeout=timeout, headers=headers) as client:
        for _ in range(MAX_REDIRECTS + 1):
            async with client.stream("GET", current_url) as response:
                if response.is_redirect:
                    next_url = urljoin(current_url, response.headers.get("location", ""))
                    _validate_url(next_url)
                    current_url = next_url
                    continue

                response.raise_for_status()

                content_length = response.headers.get("content-length")
                if content_length and int(content_length) > MAX_CONTENT_SIZE:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")

                chunks = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > MAX_CONTENT_SIZE:
                        raise RuntimeError("Response body exceeds the maximum allowed size.")
                    chunks.append(chunk)

                return b"".join(chunks).decode(errors="replace")

    raise RuntimeError("Too many redirects.")
