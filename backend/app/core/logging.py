"""Logging setup shared by the API process and the scripts."""
import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # boto/b2 are chatty at INFO
    for noisy in ("botocore", "boto3", "urllib3", "b2sdk"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
