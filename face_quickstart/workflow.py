# coding: utf-8

"""
Enrollment and Identification Workflow

Linear quickstart against Azure AI Vision Face: create a person group,
enroll quality-gated faces per person, train, detect and identify the faces
of a group photo, verify one of them, then delete the group.

Key Features:
	- Explicit per-run context instead of process-wide state
	- Strictly ordered state machine, no rollback on failure
	- Human-readable progress lines on stdout
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .config import QuickstartConfig
from .exceptions import WorkflowError
from .face_detector import FaceDetector, filter_sufficient_faces
from .face_identifier import FaceIdentifier, IdentifiedFace, VerificationResult, describe_identification
from .person_group import PersonGroupAdministrator
from .throttle import FixedDelayThrottle, Throttle


class WorkflowState(Enum):
	"""Workflow states, in the only order they can be reached"""
	UNCONFIGURED = "unconfigured"
	GROUP_CREATED = "group_created"
	PERSONS_ENROLLED = "persons_enrolled"
	TRAINED = "trained"
	SOURCE_DETECTED = "source_detected"
	IDENTIFIED = "identified"
	VERIFIED = "verified"
	GROUP_DELETED = "group_deleted"


_STATE_ORDER = list(WorkflowState)


class WorkflowContext:
	"""
	Workflow Context

	State of a single run: the person group id, the person id -> display name
	table built during enrollment, and the results of the later steps. Created
	once per run and discarded with it.
	"""

	def __init__(self, group_id: str):
		self.group_id = group_id
		self.state = WorkflowState.UNCONFIGURED
		self.person_names: Dict[str, str] = {}
		self.enrolled_faces: Dict[str, List[str]] = {}
		self.rejected_images: List[str] = []
		self.source_face_ids: List[str] = []
		self.identification: List[IdentifiedFace] = []
		self.verification: Optional[VerificationResult] = None

	def advance(self, state: WorkflowState) -> None:
		"""Move to the next state; anything but the immediate successor is an error"""
		current = _STATE_ORDER.index(self.state)
		if _STATE_ORDER.index(state) != current + 1:
			raise WorkflowError(f"Cannot move from {self.state.value} to {state.value}")
		self.state = state

	def add_person(self, person_id: str, name: str) -> None:
		self.person_names[person_id] = name
		self.enrolled_faces.setdefault(person_id, [])

	def person_id_for(self, name: str) -> str:
		"""Look up the person id of a display name"""
		for person_id, person_name in self.person_names.items():
			if person_name == name:
				return person_id
		raise WorkflowError(f"No person named {name} in group {self.group_id}")

	def __repr__(self) -> str:
		return f"WorkflowContext(group_id='{self.group_id}', state={self.state.value}, persons={len(self.person_names)})"


class EnrollmentAndIdentificationWorkflow:
	"""
	Enrollment and Identification Workflow

	Runs every step once, in order. Remote failures propagate and leave the
	person group as it was at the point of failure.
	"""

	def __init__(
		self,
		config: QuickstartConfig,
		administrator: Optional[PersonGroupAdministrator] = None,
		detector: Optional[FaceDetector] = None,
		identifier: Optional[FaceIdentifier] = None,
		throttle: Optional[Throttle] = None,
		echo: Callable[[str], Any] = print,
		logger: Optional[logging.Logger] = None
	):
		"""
		Initialize the workflow

		Args:
			config: Loaded quickstart configuration
			administrator: Person group administrator; built from config if omitted
			detector: Face detector; shares the administrator's face client if omitted
			identifier: Face identifier; shares the administrator's face client if omitted
			throttle: Throttle for person creation, also applied to an injected administrator;
				defaults to the configured fixed delay
			echo: Sink for progress lines
			logger: Optional logger instance
		"""
		self.config = config
		self.echo = echo
		self.logger = logger or self._setup_logger()

		if administrator is None:
			administrator = PersonGroupAdministrator(
				endpoint=config.endpoint,
				api_key=config.key,
				throttle=throttle if throttle is not None else FixedDelayThrottle(config.rate_limit_delay),
				training_poll_interval=config.training_poll_interval,
				logger=self.logger,
				log_level=logging.getLevelName(config.log_level)
			)
		elif throttle is not None:
			administrator.throttle = throttle
		self.administrator = administrator
		self.detector = detector or FaceDetector(administrator.face_client, logger=self.logger)
		self.identifier = identifier or FaceIdentifier(administrator.face_client, logger=self.logger)

	def _setup_logger(self) -> logging.Logger:
		"""Setup logger for the workflow"""
		logger = logging.getLogger(f"{self.__class__.__name__}")
		if not logger.handlers:
			handler = logging.StreamHandler()
			formatter = logging.Formatter(
				'%(asctime)s %(levelname)s %(message)s',
				datefmt='%Y-%m-%d %H:%M:%S'
			)
			handler.setFormatter(formatter)
			logger.addHandler(handler)
			logger.setLevel(logging.getLevelName(self.config.log_level))
		return logger

	def run(self) -> WorkflowContext:
		"""Run the whole workflow and return its context"""
		context = WorkflowContext(self.config.person_group_id)
		self.logger.info(f"Starting workflow: {self.config!r}")

		self.create_group(context)
		self.enroll_persons(context)
		self.train(context)
		self.detect_source_faces(context)
		self.identify(context)
		self.verify(context)
		self.delete_group(context)

		self.logger.info(f"Workflow finished: {context!r}")
		return context

	def create_group(self, context: WorkflowContext) -> None:
		self.echo(f"Creating a new person group: {context.group_id}")
		self.administrator.create_group(context.group_id, self.config.person_group_name)
		context.advance(WorkflowState.GROUP_CREATED)

	def enroll_persons(self, context: WorkflowContext) -> None:
		"""Create every person and enroll those of their images that pass the quality gate"""
		for person_name, images in self.config.person_images.items():
			self.echo(f"Creating a new person: {person_name}")
			person_id = self.administrator.create_person(context.group_id, person_name)
			context.add_person(person_id, person_name)

			for image in images:
				image_url = self.config.image_url(image)
				self.echo(f"Check if the image {image} is of sufficient quality for recognition")
				if not self.detector.check_enrollment_image(image_url):
					self.echo(f"The image {image} is not of sufficient quality for recognition")
					context.rejected_images.append(image)
					continue

				self.echo(f"Adding face to {person_name} from image: {image}")
				face_id = self.administrator.enroll_face(context.group_id, person_id, image_url, user_data=image)
				context.enrolled_faces[person_id].append(face_id)

		context.advance(WorkflowState.PERSONS_ENROLLED)

	def train(self, context: WorkflowContext) -> None:
		self.echo("Training the person group")
		self.administrator.train(context.group_id)
		context.advance(WorkflowState.TRAINED)

	def detect_source_faces(self, context: WorkflowContext) -> List[str]:
		"""Detect faces in the source image and keep the ids of those of sufficient quality"""
		self.echo("")
		self.echo("Detecting faces in source image")
		faces = self.detector.detect(self.config.image_url(self.config.source_image), return_face_id=True)
		context.source_face_ids = filter_sufficient_faces(faces)
		self.logger.info(f"{len(context.source_face_ids)} of {len(faces)} source faces are of sufficient quality")
		context.advance(WorkflowState.SOURCE_DETECTED)
		return context.source_face_ids

	def identify(self, context: WorkflowContext) -> List[IdentifiedFace]:
		"""
		Identify the sufficient source faces against the group

		Raises WorkflowError without calling the service when no source face
		passed the quality gate, instead of letting the empty identify request
		fail remotely.
		"""
		if not context.source_face_ids:
			raise WorkflowError(f"No face of sufficient quality in source image {self.config.source_image}")

		self.echo("Identifying faces in source image")
		context.identification = self.identifier.identify(context.source_face_ids, context.group_id)
		for line in describe_identification(context.identification, context.person_names):
			self.echo(line)
		context.advance(WorkflowState.IDENTIFIED)
		return context.identification

	def verify(self, context: WorkflowContext) -> VerificationResult:
		"""Verify the first sufficient source face against the configured person"""
		target_face_id = context.source_face_ids[0]
		person_name = self.config.verify_person_name
		person_id = context.person_id_for(person_name)

		self.echo("")
		self.echo(f"Verifying face {target_face_id} with the person {person_id}")
		context.verification = self.identifier.verify(target_face_id, context.group_id, person_id)
		self.echo(f"The confidence of the face belonging to {person_name} is: {context.verification.confidence}")
		context.advance(WorkflowState.VERIFIED)
		return context.verification

	def delete_group(self, context: WorkflowContext) -> None:
		self.echo("")
		self.echo("Deleting the person group")
		self.administrator.delete_group(context.group_id)
		context.advance(WorkflowState.GROUP_DELETED)
