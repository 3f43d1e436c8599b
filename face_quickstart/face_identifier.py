# coding: utf-8

"""
Face Identification and Verification

Open-set identification of detected faces against a trained person group,
and closed-set verification of one face against one claimed person.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

# Identify accepts at most this many face ids per request
MAX_FACES_PER_IDENTIFY = 10


@dataclass
class IdentificationCandidate:
    """A person matched to a face, with the service confidence in [0, 1]"""
    person_id: str
    confidence: float


@dataclass
class IdentifiedFace:
    """Identification result for one face; candidates keep the service ranking"""
    face_id: str
    candidates: List[IdentificationCandidate] = field(default_factory=list)

    @property
    def is_identified(self) -> bool:
        return bool(self.candidates)


@dataclass
class VerificationResult:
    """Confidence that a face belongs to one specific person"""
    face_id: str
    person_id: str
    confidence: float
    is_identical: bool


def describe_identification(results: Sequence[IdentifiedFace], person_names: Dict[str, str]) -> List[str]:
    """
    Render identification results as progress lines

    A face without candidates yields a single "No person identified" line
    and never touches person_names. Otherwise there is one line per
    candidate, in service order.
    """
    lines = []
    for identified_face in results:
        if not identified_face.candidates:
            lines.append(f"No person identified for {identified_face.face_id}")
            continue
        for candidate in identified_face.candidates:
            lines.append(
                f"Person {person_names[candidate.person_id]} is identified for "
                f"{identified_face.face_id} with a confidence of {candidate.confidence}"
            )
    return lines


class FaceIdentifier:
    """Identify and verify client for person groups"""

    def __init__(self, face_client: Any, logger: Optional[logging.Logger] = None):
        self.face_client = face_client
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    def identify(self, face_ids: Sequence[str], group_id: str) -> List[IdentifiedFace]:
        """Identify faces against the group, one result per input face id"""
        face_ids = list(face_ids)
        identified = []

        for start in range(0, len(face_ids), MAX_FACES_PER_IDENTIFY):
            batch = face_ids[start:start + MAX_FACES_PER_IDENTIFY]
            try:
                results = self.face_client.identify_from_person_group(
                    face_ids=batch,
                    person_group_id=group_id
                )
            except Exception as e:
                self.logger.error(f"Error identifying {len(batch)} faces in group {group_id}: {e}")
                raise

            for result in results:
                identified.append(IdentifiedFace(
                    face_id=result.face_id,
                    candidates=[
                        IdentificationCandidate(person_id=c.person_id, confidence=c.confidence)
                        for c in result.candidates or []
                    ]
                ))

        self.logger.info(f"Identified {sum(f.is_identified for f in identified)} of {len(identified)} faces in group {group_id}")
        return identified

    def verify(self, face_id: str, group_id: str, person_id: str) -> VerificationResult:
        """Verify whether face_id belongs to person_id of the group"""
        try:
            result = self.face_client.verify_from_person_group(
                face_id=face_id,
                person_group_id=group_id,
                person_id=person_id
            )
        except Exception as e:
            self.logger.error(f"Error verifying face {face_id} against person {person_id}: {e}")
            raise

        self.logger.debug(f"Verified face {face_id} against {person_id}: {result.confidence}")
        return VerificationResult(
            face_id=face_id,
            person_id=person_id,
            confidence=result.confidence,
            is_identical=result.is_identical
        )
