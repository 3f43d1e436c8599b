# coding: utf-8

"""
Quickstart Exceptions

Error taxonomy for the enrollment and identification workflow. Remote call
failures are not wrapped: they surface as azure.core.exceptions.HttpResponseError
and its subclasses.
"""


class FaceQuickstartError(Exception):
    """Base class for all quickstart errors"""


class ConfigurationError(FaceQuickstartError, ValueError):
    """Required configuration is missing or malformed"""


class OperationError(FaceQuickstartError):
    """A long-running remote operation ended in a non-success state"""


class TrainingError(OperationError):
    """Person group training failed or did not complete in time"""

    def __init__(self, group_id: str, status: str, message: str = ""):
        self.group_id = group_id
        self.status = status
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"Training of group {group_id} ended with status '{status}'{detail}")


class WorkflowError(FaceQuickstartError):
    """The workflow cannot proceed from its current state"""
