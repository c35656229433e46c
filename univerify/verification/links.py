from urllib.parse import quote, unquote, urlsplit


def build_verification_link(app_url: str, document_id: str, document_hash: str) -> str:
    """Build the shareable ``/verify/{documentId}/{hash}`` link."""
    if not document_id or not document_hash:
        raise ValueError("Both document id and hash are required for a verification link")
    base = app_url.rstrip("/")
    return f"{base}/verify/{quote(document_id, safe='')}/{quote(document_hash, safe='')}"


def parse_verification_link(url: str) -> tuple[str, str]:
    """Extract ``(document_id, hash)`` from a verification link.

    Raises:
        ValueError: if the URL path does not end in ``/verify/{id}/{hash}``.
    """
    segments = [s for s in urlsplit(url).path.split("/") if s]
    if len(segments) < 3 or segments[-3] != "verify":
        raise ValueError(f"Not a verification link: {url}")
    return unquote(segments[-2]), unquote(segments[-1])
