# coding: utf-8

"""
Face Detection and Quality Gate

Detects faces in images by URL and classifies them by quality for
recognition. Two gates are applied on top of detection:

    - Enrollment gate: an image is usable only if every face in it is of
      high quality. One low-quality face rejects the whole image.
    - Query gate: each detected face is kept or dropped on its own, so the
      good faces of a group photo still reach identification.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence
from azure.ai.vision.face.models import (
    FaceAttributeTypeRecognition04,
    FaceDetectionModel,
    FaceRecognitionModel,
    QualityForRecognition,
)

SUFFICIENT_QUALITY = QualityForRecognition.HIGH


@dataclass
class DetectedFace:
    """A face found by a single detection call"""
    face_id: Optional[str]
    quality: Optional[QualityForRecognition]

    @classmethod
    def from_result(cls, result: Any) -> "DetectedFace":
        attributes = getattr(result, "face_attributes", None)
        quality = getattr(attributes, "quality_for_recognition", None) if attributes else None
        return cls(face_id=getattr(result, "face_id", None), quality=quality)


def is_sufficient_quality(face: DetectedFace) -> bool:
    """A face is usable for recognition only at the top quality tier"""
    return face.quality == SUFFICIENT_QUALITY


def image_has_sufficient_quality(faces: Sequence[DetectedFace]) -> bool:
    """Enrollment gate: every detected face of sufficient quality (true for no faces)"""
    return all(is_sufficient_quality(face) for face in faces)


def filter_sufficient_faces(faces: Sequence[DetectedFace]) -> List[str]:
    """Query gate: ids of the sufficient faces, in detection order"""
    return [face.face_id for face in faces if is_sufficient_quality(face) and face.face_id]


class FaceDetector:
    """Face detection client with quality-for-recognition attributes"""

    def __init__(
        self,
        face_client: Any,
        detection_model: FaceDetectionModel = FaceDetectionModel.DETECTION03,
        recognition_model: FaceRecognitionModel = FaceRecognitionModel.RECOGNITION04,
        logger: Optional[logging.Logger] = None
    ):
        self.face_client = face_client
        self.detection_model = detection_model
        self.recognition_model = recognition_model
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    def detect(self, image_url: str, return_face_id: bool = True, want_quality: bool = True) -> List[DetectedFace]:
        """
        Detect faces in the image at image_url

        Args:
            image_url: Fetchable image URL
            return_face_id: Request face ids usable by identify and verify
            want_quality: Request the quality-for-recognition attribute

        Returns:
            Detected faces in service order
        """
        attributes = [FaceAttributeTypeRecognition04.QUALITY_FOR_RECOGNITION] if want_quality else None
        try:
            results = self.face_client.detect_from_url(
                url=image_url,
                detection_model=self.detection_model,
                recognition_model=self.recognition_model,
                return_face_id=return_face_id,
                return_face_attributes=attributes
            )
        except Exception as e:
            self.logger.error(f"Error detecting faces in {image_url}: {e}")
            raise

        faces = [DetectedFace.from_result(result) for result in results or []]
        self.logger.debug(f"Detected {len(faces)} faces in {image_url}: {[str(f.quality) for f in faces]}")
        return faces

    def check_enrollment_image(self, image_url: str) -> bool:
        """Detect faces without ids and apply the whole-image enrollment gate"""
        faces = self.detect(image_url, return_face_id=False)
        sufficient = image_has_sufficient_quality(faces)
        if not sufficient:
            self.logger.info(f"Rejected {image_url}: {len(faces)} faces, qualities {[str(f.quality) for f in faces]}")
        return sufficient
