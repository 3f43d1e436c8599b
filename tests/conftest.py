# coding: utf-8

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from azure.ai.vision.face.models import FaceOperationStatus, QualityForRecognition

from face_quickstart.person_group import PersonGroupAdministrator
from face_quickstart.throttle import NoThrottle


def detection(face_id=None, quality=QualityForRecognition.HIGH):
    """Build a detect_from_url result item"""
    return SimpleNamespace(
        face_id=face_id,
        face_attributes=SimpleNamespace(quality_for_recognition=quality)
    )


def training_status(status, message=None):
    return SimpleNamespace(status=status, message=message)


def identification(face_id, *candidates):
    return SimpleNamespace(
        face_id=face_id,
        candidates=[SimpleNamespace(person_id=p, confidence=c) for p, c in candidates]
    )


@pytest.fixture
def service():
    """Parent mock recording calls to both clients in order"""
    service = Mock()
    service.admin.person_group.create_person.side_effect = (
        lambda group_id, name: SimpleNamespace(person_id=f"id-{name}")
    )
    service.admin.person_group.add_face_from_url.side_effect = (
        lambda group_id, person_id, **kwargs: SimpleNamespace(persisted_face_id=f"pf-{kwargs['user_data']}")
    )
    service.admin.person_group.get_training_status.return_value = training_status(FaceOperationStatus.SUCCEEDED)
    return service


@pytest.fixture
def face_client(service):
    return service.face


@pytest.fixture
def admin_client(service):
    return service.admin


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def administrator(face_client, admin_client, sleeps):
    return PersonGroupAdministrator(
        endpoint="https://example.cognitiveservices.azure.com/",
        api_key="test-key",
        throttle=NoThrottle(),
        training_poll_interval=0.5,
        face_client=face_client,
        face_admin_client=admin_client,
        sleep=sleeps.append
    )
