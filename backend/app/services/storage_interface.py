from typing import Protocol, Optional
from urllib.parse import quote, unquote


class StorageInterface(Protocol):
    """
    Blob store contract shared by every storage provider (S3/R2, B2 bucket handle).

    Keys are opaque UTF-8 strings chosen by the caller. Providers must be
    interchangeable: same key in, same URL out, and every backend failure
    surfaces as app.core.exceptions.StorageError.
    """

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        """Store bytes under key, replacing any previous object."""
        ...

    def delete(self, key: str) -> None:
        """Remove the object at key. Deleting a missing key is not an error."""
        ...

    def public_url(self, key: str) -> str:
        """Pure URL derivation, no I/O."""
        ...

    def key_from_url(self, url: str) -> Optional[str]:
        """Inverse of public_url, or None if url was not produced by this store."""
        ...


def normalize_base_url(base_url: str) -> str:
    return base_url[:-1] if base_url.endswith("/") else base_url


def build_public_url(base_url: str, key: str) -> str:
    """Keys are percent-encoded per segment so names with spaces, # or ? stay fetchable."""
    return f"{normalize_base_url(base_url)}/{quote(key, safe='/')}"


def key_from_public_url(base_url: str, url: str) -> Optional[str]:
    """Strip the configured base URL prefix from a public URL."""
    prefix = normalize_base_url(base_url) + "/"
    if base_url and url.startswith(prefix):
        return unquote(url[len(prefix):]) or None
    return None
