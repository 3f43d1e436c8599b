# coding: utf-8

"""
Person Group Administration

Manages persons, enrolled faces and training of a single person group using
Azure AI Vision Face API.

Key Features:
    - Throttled person creation
    - Face enrollment from image URLs
    - Pollable and blocking training
"""

import logging
import time
from typing import Any, Callable, Optional
from azure.ai.vision.face.models import FaceDetectionModel, FaceOperationStatus
from .base_group_manager import BaseGroupManager
from .exceptions import TrainingError
from .throttle import FixedDelayThrottle, Throttle

MAX_TRAINING_POLL_INTERVAL = 30.0


def _status_value(status: Any) -> str:
    return getattr(status, "value", status) or "unknown"


class PersonGroupAdministrator(BaseGroupManager):
    """
    Person Group Administrator

    Creates persons inside a person group, attaches face samples to them and
    trains the group. Training exposes a non-blocking start, a status poll and
    a blocking wait built on that poll.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        throttle: Optional[Throttle] = None,
        training_poll_interval: float = 1.0,
        logger: Optional[logging.Logger] = None,
        log_level: int = logging.INFO,
        face_client: Optional[Any] = None,
        face_admin_client: Optional[Any] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        """Initialize person group administrator"""
        super().__init__(endpoint, api_key, logger, log_level, face_client, face_admin_client)

        # Limit TPS on person creation
        self.throttle = throttle if throttle is not None else FixedDelayThrottle()
        self.training_poll_interval = training_poll_interval
        self._sleep = sleep
        self._clock = clock

    def create_person(self, group_id: str, name: str) -> str:
        """Create a person in the group and return the service-issued person id"""
        self.throttle.wait()
        try:
            person = self.face_admin_client.person_group.create_person(group_id, name=name)
        except Exception as e:
            self.logger.error(f"Error creating person {name} in group {group_id}: {e}")
            raise
        self.logger.info(f"Created person {name} with ID: {person.person_id} in group {group_id}")
        return person.person_id

    def enroll_face(self, group_id: str, person_id: str, image_url: str, user_data: str = "") -> str:
        """
        Add a face from an image URL to a person

        Only call this once the image passed the enrollment quality gate.
        user_data is stored with the face for traceability (the source filename).

        Returns:
            Persisted face id
        """
        try:
            face = self.face_admin_client.person_group.add_face_from_url(
                group_id,
                person_id,
                url=image_url,
                detection_model=FaceDetectionModel.DETECTION03,
                user_data=user_data or None
            )
        except Exception as e:
            self.logger.error(f"Error adding face to person {person_id} in group {group_id}: {e}")
            raise
        self.logger.info(f"Added face {face.persisted_face_id} to person {person_id} from {image_url}")
        return face.persisted_face_id

    def start_training(self, group_id: str) -> None:
        """
        Submit the training request without waiting for it to finish

        The SDK poller is discarded (polling=False); wait_for_training polls
        get_training_status itself so the interval can back off and a
        failed status carries the service message.
        """
        try:
            self.face_admin_client.person_group.begin_train(group_id, polling=False)
        except Exception as e:
            self.logger.error(f"Error starting training for group {group_id}: {e}")
            raise
        self.logger.info(f"Training started for group: {group_id}")

    def get_training_status(self, group_id: str) -> Any:
        """Get the training status record of the group"""
        return self.face_admin_client.person_group.get_training_status(group_id)

    def wait_for_training(
        self,
        group_id: str,
        poll_interval: Optional[float] = None,
        max_poll_interval: float = MAX_TRAINING_POLL_INTERVAL,
        timeout: Optional[float] = None
    ) -> Any:
        """
        Poll training status until it reaches a terminal state

        The delay between polls starts at poll_interval and doubles up to
        max_poll_interval.

        Returns:
            The final training status record

        Raises:
            TrainingError: If training failed or did not finish within timeout
        """
        interval = self.training_poll_interval if poll_interval is None else poll_interval
        deadline = None if timeout is None else self._clock() + timeout

        while True:
            result = self.get_training_status(group_id)
            status = result.status

            if status == FaceOperationStatus.SUCCEEDED:
                self.logger.info(f"Training succeeded for group: {group_id}")
                return result

            if status == FaceOperationStatus.FAILED:
                self.logger.error(f"Training failed for group {group_id}: {result.message}")
                raise TrainingError(group_id, _status_value(status), result.message or "")

            if deadline is not None and self._clock() + interval > deadline:
                raise TrainingError(group_id, _status_value(status), f"not completed within {timeout}s")

            self.logger.debug(f"Training status for {group_id}: {_status_value(status)}, next poll in {interval}s")
            self._sleep(interval)
            interval = min(interval * 2, max_poll_interval)

    def train(self, group_id: str, timeout: Optional[float] = None) -> Any:
        """Train the group and block until training completes"""
        self.start_training(group_id)
        return self.wait_for_training(group_id, timeout=timeout)
