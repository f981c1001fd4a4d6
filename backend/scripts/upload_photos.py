"""
Upload photos into an album from the command line.

Images are compressed locally (downscaled to --max-width and re-encoded as
JPEG when that makes them smaller) before being sent, which keeps most phone
photos under the server's upload limit.

    python scripts/upload_photos.py --api http://localhost:8000 --token $TOKEN \
        --album 7b1f0c8e-... ~/Pictures/trip/*.jpg
"""
import os
import sys
import logging
import argparse
import mimetypes

import requests

# Add backend to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.core.logging import configure_logging
from app.services.image_processing import compress_image

logger = logging.getLogger(__name__)


def upload_file(session: requests.Session, api: str, album_id: str, path: str, quality: float, max_width: int, caption: str = None) -> dict:
    with open(path, "rb") as f:
        data = f.read()

    content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    image = compress_image(data, content_type, os.path.basename(path), quality=quality, max_width=max_width)

    if image.compressed:
        logger.info(f"{path}: {len(data)} -> {len(image.data)} bytes ({image.width}x{image.height})")
    if len(image.data) > settings.max_upload_size_bytes:
        logger.warning(f"{path}: {len(image.data)} bytes is over the server limit, the upload will be rejected")

    form = {"album_id": album_id}
    if caption:
        form["caption"] = caption

    response = session.post(
        f"{api.rstrip('/')}/api/v1/photos",
        data=form,
        files={"file": (image.filename, image.data, image.content_type)},
        timeout=60,
    )
    response.raise_for_status()
    return response.json()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Compress and upload photos to an album")
    parser.add_argument("files", nargs="+", help="Image files to upload")
    parser.add_argument("--api", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--token", default=os.environ.get("KEEPSAKE_TOKEN"), help="Bearer token (or KEEPSAKE_TOKEN)")
    parser.add_argument("--album", required=True, help="Target album id")
    parser.add_argument("--caption", default=None)
    parser.add_argument("--quality", type=float, default=settings.IMAGE_JPEG_QUALITY)
    parser.add_argument("--max-width", type=int, default=settings.IMAGE_MAX_WIDTH)
    args = parser.parse_args(argv)

    if not args.token:
        parser.error("a bearer token is required (--token or KEEPSAKE_TOKEN)")

    configure_logging(settings.LOG_LEVEL)

    session = requests.Session()
    session.headers["Authorization"] = f"Bearer {args.token}"

    failures = 0
    for path in args.files:
        try:
            photo = upload_file(session, args.api, args.album, path, args.quality, args.max_width, args.caption)
            logger.info(f"Uploaded {path} -> {photo['url']}")
        except (OSError, requests.RequestException) as e:
            failures += 1
            logger.error(f"Failed to upload {path}: {e}")

    logger.info(f"Done: {len(args.files) - failures} uploaded, {failures} failed")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
