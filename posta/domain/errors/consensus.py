"""Consensus errors for multi-verifier approval."""

from typing import Any

from posta.domain.exceptions import PostaError


class ConsensusError(PostaError):
    """Base class for rejected verification attempts.

    Recoverable by retrying with a different verifier or goal tag.

    Attributes:
        case_id: The case being verified.
    """

    error_code = "CONSENSUS_ERROR"

    def __init__(self, case_id: str, message: str) -> None:
        self.case_id = case_id
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "case_id": self.case_id}


class VerificationTargetNotFoundError(ConsensusError):
    """Raised when the case has no verification record for the goal tag."""

    error_code = "VERIFICATION_TARGET_NOT_FOUND"

    def __init__(self, case_id: str, goal_tag: str) -> None:
        self.goal_tag = goal_tag
        super().__init__(case_id, f"Verification target {goal_tag} not found on case {case_id}")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "goal_tag": self.goal_tag}


class SelfVerificationError(ConsensusError):
    """Raised when the case author tries to verify their own claim."""

    error_code = "SELF_VERIFICATION"

    def __init__(self, case_id: str, verifier_id: str) -> None:
        self.verifier_id = verifier_id
        super().__init__(case_id, "Authors cannot self-verify claims")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "verifier_id": self.verifier_id}
