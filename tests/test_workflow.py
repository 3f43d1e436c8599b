# coding: utf-8

"""End-to-end workflow tests against mocked Face clients"""

from types import SimpleNamespace

import pytest
from azure.ai.vision.face.models import FaceOperationStatus, QualityForRecognition
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from face_quickstart.config import QuickstartConfig
from face_quickstart.exceptions import TrainingError, WorkflowError
from face_quickstart.person_group import PersonGroupAdministrator
from face_quickstart.throttle import FixedDelayThrottle
from face_quickstart.workflow import EnrollmentAndIdentificationWorkflow, WorkflowContext, WorkflowState
from tests.conftest import detection, identification, training_status

HIGH = QualityForRecognition.HIGH
LOW = QualityForRecognition.LOW
BASE_URL = "https://images.example.com/"


def fake_detect(url, return_face_id, **kwargs):
    filename = url[len(BASE_URL):]
    if filename == "identification1.jpg":
        return [detection("src-1", HIGH), detection("src-2", LOW), detection("src-3", HIGH)]
    if filename == "Family1-Son2.jpg":
        # One good face is not enough for enrollment
        return [detection(None, HIGH), detection(None, LOW)]
    if filename == "Family2-Man1.jpg":
        return [detection(None, QualityForRecognition.MEDIUM)]
    return [detection(None, HIGH)]


@pytest.fixture
def config():
    return QuickstartConfig.from_env({
        "VISION_ENDPOINT": "https://example.cognitiveservices.azure.com/",
        "VISION_KEY": "test-key",
        "FACE_IMAGE_BASE_URL": BASE_URL,
    })


@pytest.fixture
def echoed():
    return []


@pytest.fixture
def workflow(config, administrator, face_client, echoed):
    face_client.detect_from_url.side_effect = fake_detect
    face_client.identify_from_person_group.return_value = [
        identification("src-1", ("id-Family1-Dad", 0.92)),
        identification("src-3"),
    ]
    face_client.verify_from_person_group.return_value = SimpleNamespace(confidence=0.92, is_identical=True)
    return EnrollmentAndIdentificationWorkflow(config, administrator=administrator, echo=echoed.append)


def test_full_run_order(workflow, service):
    context = workflow.run()

    calls = [name for name, args, kwargs in service.mock_calls]
    enrollment = []
    for name, images in workflow.config.person_images.items():
        enrollment.append("admin.person_group.create_person")
        for image in images:
            enrollment.append("face.detect_from_url")
            if image not in ("Family1-Son2.jpg", "Family2-Man1.jpg"):
                enrollment.append("admin.person_group.add_face_from_url")

    assert calls == (
        ["admin.person_group.create"]
        + enrollment
        + [
            "admin.person_group.begin_train",
            "admin.person_group.get_training_status",
            "face.detect_from_url",
            "face.identify_from_person_group",
            "face.verify_from_person_group",
            "admin.person_group.delete",
        ]
    )
    assert context.state == WorkflowState.GROUP_DELETED


def test_full_run_results(workflow, service, echoed):
    context = workflow.run()

    assert len(context.person_names) == 6
    assert context.rejected_images == ["Family1-Son2.jpg", "Family2-Man1.jpg"]
    assert context.enrolled_faces["id-Family1-Son"] == ["pf-Family1-Son1.jpg"]
    assert context.enrolled_faces["id-Family2-Man"] == ["pf-Family2-Man2.jpg"]
    assert context.source_face_ids == ["src-1", "src-3"]

    service.face.identify_from_person_group.assert_called_once_with(
        face_ids=["src-1", "src-3"], person_group_id="my-person-group"
    )
    service.face.verify_from_person_group.assert_called_once_with(
        face_id="src-1", person_group_id="my-person-group", person_id="id-Family1-Dad"
    )
    service.admin.person_group.delete.assert_called_once_with("my-person-group")

    assert "The image Family1-Son2.jpg is not of sufficient quality for recognition" in echoed
    assert "Adding face to Family1-Dad from image: Family1-Dad1.jpg" in echoed
    assert "Person Family1-Dad is identified for src-1 with a confidence of 0.92" in echoed
    assert "No person identified for src-3" in echoed
    assert echoed[-1] == "Deleting the person group"
    assert "The confidence of the face belonging to Family1-Dad is: 0.92" in echoed


def test_no_residual_group_after_run(workflow, administrator, admin_client):
    workflow.run()
    admin_client.person_group.get.side_effect = ResourceNotFoundError("PersonGroupNotFound")

    assert administrator.group_exists("my-person-group") is False


def test_throttle_runs_once_per_person(config, face_client, admin_client):
    delays = []
    face_client.detect_from_url.side_effect = fake_detect
    face_client.identify_from_person_group.return_value = [identification("src-1"), identification("src-3")]
    face_client.verify_from_person_group.return_value = SimpleNamespace(confidence=0.1, is_identical=False)
    administrator = PersonGroupAdministrator(
        config.endpoint, config.key,
        throttle=FixedDelayThrottle(0.25, sleep=delays.append),
        face_client=face_client,
        face_admin_client=admin_client
    )

    EnrollmentAndIdentificationWorkflow(config, administrator=administrator, echo=lambda line: None).run()

    assert delays == [0.25] * 6


def test_training_failure_aborts_without_cleanup(workflow, service, admin_client):
    admin_client.person_group.get_training_status.return_value = training_status(FaceOperationStatus.FAILED, "boom")

    with pytest.raises(TrainingError):
        workflow.run()

    service.face.detect_from_url.assert_called()
    service.face.identify_from_person_group.assert_not_called()
    admin_client.person_group.delete.assert_not_called()


def test_remote_failure_propagates(workflow, admin_client):
    admin_client.person_group.create_person.side_effect = HttpResponseError("Rate limit is exceeded")

    with pytest.raises(HttpResponseError):
        workflow.run()

    admin_client.person_group.delete.assert_not_called()


def test_no_sufficient_source_face_aborts(workflow, face_client):
    def detect(url, return_face_id, **kwargs):
        if return_face_id:
            return [detection("src-1", LOW)]
        return [detection(None, HIGH)]

    face_client.detect_from_url.side_effect = detect

    with pytest.raises(WorkflowError, match="No face of sufficient quality"):
        workflow.run()

    face_client.identify_from_person_group.assert_not_called()


def test_context_rejects_out_of_order_transition():
    context = WorkflowContext("g")
    context.advance(WorkflowState.GROUP_CREATED)

    with pytest.raises(WorkflowError):
        context.advance(WorkflowState.TRAINED)
    assert context.state == WorkflowState.GROUP_CREATED


def test_context_person_lookup():
    context = WorkflowContext("g")
    context.add_person("p1", "Family1-Dad")

    assert context.person_id_for("Family1-Dad") == "p1"
    with pytest.raises(WorkflowError):
        context.person_id_for("Family1-Mom")


def test_image_without_faces_reaches_service_and_aborts(workflow, face_client, admin_client):
    def detect(url, return_face_id, **kwargs):
        if url.endswith("Family1-Dad1.jpg"):
            return []
        return fake_detect(url, return_face_id, **kwargs)

    face_client.detect_from_url.side_effect = detect
    admin_client.person_group.add_face_from_url.side_effect = HttpResponseError("InvalidImage: No face detected")

    with pytest.raises(HttpResponseError, match="No face detected"):
        workflow.run()

    assert admin_client.person_group.add_face_from_url.call_args.kwargs["user_data"] == "Family1-Dad1.jpg"
    admin_client.person_group.begin_train.assert_not_called()
    admin_client.person_group.delete.assert_not_called()


def test_injected_administrator_uses_given_throttle(config, administrator):
    delays = []
    throttle = FixedDelayThrottle(0.5, sleep=delays.append)

    workflow = EnrollmentAndIdentificationWorkflow(config, administrator=administrator, throttle=throttle, echo=lambda line: None)
    workflow.administrator.create_person("g", "Family1-Dad")

    assert workflow.administrator.throttle is throttle
    assert delays == [0.5]
