# coding: utf-8

"""
Face Quickstart Package

A linear quickstart for Azure AI Vision Face API person groups: enroll
people from sample images, train, then identify and verify the faces of a
group photo.

Main Components:
- EnrollmentAndIdentificationWorkflow: Runs the quickstart end to end
- PersonGroupAdministrator: Persons, face enrollment and training
- FaceDetector: Detection with quality-for-recognition gates
- FaceIdentifier: Identification and verification
- BaseGroupManager: Client setup and person group lifecycle
- QuickstartConfig: Environment configuration
"""

from .config import QuickstartConfig
from .exceptions import ConfigurationError, FaceQuickstartError, OperationError, TrainingError, WorkflowError
from .throttle import FixedDelayThrottle, NoThrottle, Throttle
from .base_group_manager import BaseGroupManager
from .person_group import PersonGroupAdministrator
from .face_detector import DetectedFace, FaceDetector
from .face_identifier import FaceIdentifier, IdentificationCandidate, IdentifiedFace, VerificationResult
from .workflow import EnrollmentAndIdentificationWorkflow, WorkflowContext, WorkflowState

__version__ = "1.0.0"

__all__ = [
	"QuickstartConfig",
	"ConfigurationError",
	"FaceQuickstartError",
	"OperationError",
	"TrainingError",
	"WorkflowError",
	"Throttle",
	"FixedDelayThrottle",
	"NoThrottle",
	"BaseGroupManager",
	"PersonGroupAdministrator",
	"DetectedFace",
	"FaceDetector",
	"FaceIdentifier",
	"IdentificationCandidate",
	"IdentifiedFace",
	"VerificationResult",
	"EnrollmentAndIdentificationWorkflow",
	"WorkflowContext",
	"WorkflowState"
]
