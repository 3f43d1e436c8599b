# coding: utf-8

"""
Base Group Manager

Foundation class for person group management providing service client
construction, logger setup and group lifecycle operations for Azure AI
Vision Face API integration.

Key Features:
	- Azure Face API client management
	- Group lifecycle operations
	- Error logging before propagation
"""

import logging
from typing import Any, Optional
from azure.ai.vision.face import FaceClient, FaceAdministrationClient
from azure.ai.vision.face.models import FaceRecognitionModel
from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import ResourceNotFoundError


class BaseGroupManager:
	"""
	Base Group Manager

	Owns the Face and Face Administration clients and the person group
	lifecycle. Remote failures are logged and re-raised; nothing here
	retries or swallows a service error.
	"""

	def __init__(
		self,
		endpoint: str,
		api_key: str,
		logger: Optional[logging.Logger] = None,
		log_level: int = logging.INFO,
		face_client: Optional[Any] = None,
		face_admin_client: Optional[Any] = None
	):
		"""Initialize base group manager"""
		self.endpoint = endpoint
		self.log_level = log_level

		# Setup logger
		self.logger = logger or self._setup_logger()

		# Initialize Azure Face API clients
		if face_client is None or face_admin_client is None:
			credential = AzureKeyCredential(api_key)
			face_client = face_client or FaceClient(endpoint, credential)
			face_admin_client = face_admin_client or FaceAdministrationClient(endpoint, credential)
		self.face_client = face_client
		self.face_admin_client = face_admin_client

	def _setup_logger(self) -> logging.Logger:
		"""Setup logger for the group manager"""
		logger = logging.getLogger(f"{self.__class__.__name__}")
		if not logger.handlers:
			handler = logging.StreamHandler()
			formatter = logging.Formatter(
				'%(asctime)s %(levelname)s %(message)s',
				datefmt='%Y-%m-%d %H:%M:%S'
			)
			handler.setFormatter(formatter)
			logger.addHandler(handler)
			logger.setLevel(self.log_level)
		return logger

	def create_group(
		self,
		group_id: str,
		group_name: str,
		recognition_model: FaceRecognitionModel = FaceRecognitionModel.RECOGNITION04
	) -> None:
		"""Create a person group; an existing id is reported by the service as an error"""
		try:
			self.face_admin_client.person_group.create(
				group_id,
				name=group_name,
				recognition_model=recognition_model
			)
			self.logger.info(f"Created group: {group_id} ({recognition_model})")
		except Exception as e:
			self.logger.error(f"Error creating group {group_id}: {e}")
			raise

	def delete_group(self, group_id: str) -> None:
		"""Delete a person group together with its persons and faces"""
		try:
			self.face_admin_client.person_group.delete(group_id)
			self.logger.info(f"Deleted group: {group_id}")
		except Exception as e:
			self.logger.error(f"Error deleting group {group_id}: {e}")
			raise

	def group_exists(self, group_id: str) -> bool:
		"""Check whether a person group exists"""
		try:
			self.face_admin_client.person_group.get(group_id)
			return True
		except ResourceNotFoundError:
			self.logger.debug(f"Group {group_id} not found")
			return False
