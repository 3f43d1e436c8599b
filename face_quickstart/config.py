# coding: utf-8

"""
Quickstart Configuration

Loads the service endpoint, access key and workflow settings from the
process environment. The endpoint and key are required; everything else
has a default.

Environment:
    VISION_ENDPOINT: Face service endpoint URL (required)
    VISION_KEY: Face service access key (required)
    FACE_IMAGE_BASE_URL: Prefix used to resolve image filenames to URLs
    FACE_PERSON_GROUP_ID: Person group id created and deleted by the run
    FACE_PERSON_GROUP_NAME: Display name of the person group
    FACE_RATE_LIMIT_DELAY: Delay in seconds before each person creation
    FACE_TRAINING_POLL_INTERVAL: Initial delay in seconds between training polls
    FACE_LOG_LEVEL: Logging level name
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .exceptions import ConfigurationError

IMAGE_BASE_URL = "https://raw.githubusercontent.com/Azure-Samples/cognitive-services-sample-data-files/master/Face/images/"

# Person display name -> enrollment image filenames
PERSON_IMAGES: Dict[str, List[str]] = {
    "Family1-Dad": ["Family1-Dad1.jpg", "Family1-Dad2.jpg"],
    "Family1-Mom": ["Family1-Mom1.jpg", "Family1-Mom2.jpg"],
    "Family1-Son": ["Family1-Son1.jpg", "Family1-Son2.jpg"],
    "Family1-Daughter": ["Family1-Daughter1.jpg", "Family1-Daughter2.jpg"],
    "Family2-Lady": ["Family2-Lady1.jpg", "Family2-Lady2.jpg"],
    "Family2-Man": ["Family2-Man1.jpg", "Family2-Man2.jpg"],
}

# Group photo that includes some of the enrolled persons
SOURCE_IMAGE = "identification1.jpg"

VERIFY_PERSON_NAME = "Family1-Dad"


def _required(environ: Mapping[str, str], name: str) -> str:
    value = (environ.get(name) or "").strip()
    if not value:
        raise ConfigurationError(f"Missing {name} environment variable.")
    return value


def _seconds(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got '{raw}'") from None
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {value}")
    return value


@dataclass
class QuickstartConfig:
    """
    Workflow configuration

    Attributes:
        endpoint: Face service endpoint URL
        key: Face service access key
        image_base_url: Prefix for enrollment and source image URLs
        person_group_id: Id of the person group used for the run
        person_group_name: Display name of the person group
        rate_limit_delay: Seconds to wait before each person creation
        training_poll_interval: Initial seconds between training status polls
        log_level: Logging level name
        person_images: Person display name -> enrollment image filenames
        source_image: Query image filename
        verify_person_name: Person the first query face is verified against
    """

    endpoint: str
    key: str
    image_base_url: str = IMAGE_BASE_URL
    person_group_id: str = "my-person-group"
    person_group_name: str = "My Person Group"
    rate_limit_delay: float = 0.25
    training_poll_interval: float = 1.0
    log_level: str = "INFO"
    person_images: Optional[Dict[str, List[str]]] = None
    source_image: str = SOURCE_IMAGE
    verify_person_name: str = VERIFY_PERSON_NAME

    def __post_init__(self):
        if self.person_images is None:
            self.person_images = {name: list(images) for name, images in PERSON_IMAGES.items()}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "QuickstartConfig":
        """
        Load configuration from environment variables

        Raises:
            ConfigurationError: If VISION_ENDPOINT or VISION_KEY is missing or
                empty, or an optional value is malformed.
        """
        environ = os.environ if environ is None else environ

        endpoint = _required(environ, "VISION_ENDPOINT")
        key = _required(environ, "VISION_KEY")

        log_level = (environ.get("FACE_LOG_LEVEL") or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"FACE_LOG_LEVEL must be a logging level name, got '{log_level}'")

        image_base_url = (environ.get("FACE_IMAGE_BASE_URL") or IMAGE_BASE_URL).strip()
        if not image_base_url.endswith("/"):
            image_base_url += "/"

        return cls(
            endpoint=endpoint,
            key=key,
            image_base_url=image_base_url,
            person_group_id=(environ.get("FACE_PERSON_GROUP_ID") or "my-person-group").strip(),
            person_group_name=(environ.get("FACE_PERSON_GROUP_NAME") or "My Person Group").strip(),
            rate_limit_delay=_seconds(environ, "FACE_RATE_LIMIT_DELAY", 0.25),
            training_poll_interval=_seconds(environ, "FACE_TRAINING_POLL_INTERVAL", 1.0),
            log_level=log_level,
        )

    def image_url(self, filename: str) -> str:
        """Resolve an image filename to a fetchable URL"""
        return f"{self.image_base_url}{filename}"

    def __repr__(self) -> str:
        # Keep the access key out of logs
        return (f"QuickstartConfig(endpoint='{self.endpoint}', "
                f"person_group_id='{self.person_group_id}', "
                f"persons={len(self.person_images)})")
