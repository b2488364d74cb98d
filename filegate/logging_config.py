import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the gateway.
    Called once at startup from the application lifespan.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        stream=sys.stdout,
    )
    # Silence noisy libraries
    for name in ("botocore", "boto3", "urllib3", "s3transfer"):
        logging.getLogger(name).setLevel(logging.WARNING)
