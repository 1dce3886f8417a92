"""Intake orchestration.

IntakeService.submit turns one raw message from the transport into a case:

1. Validate identifiers
2. Integrity screening; any HIGH flag rejects the submission
3. Journey gate; an unmet prerequisite rejects with a BLOCKED status
4. Create the case (FLAGGED when LOW flags fired)
5. Commit the INTAKE ledger record and save the case
6. Complete the journey task
7. Attach reporting tags from the classifier, when one is wired

Governed rejections propagate as PostaError subclasses. Anything else is
logged, queued for human review and re-raised as EscalatedToHumanReviewError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from posta.application.ports.case_repository import CaseRepositoryProtocol
from posta.application.ports.goal_classifier import GoalClassifierProtocol
from posta.application.ports.human_review_queue import HumanReviewItem, HumanReviewQueueProtocol
from posta.application.ports.localization import LocalizationProtocol, LocalizedText
from posta.application.ports.time_authority import TimeAuthorityProtocol
from posta.application.services.base import LoggingMixin
from posta.application.services.integrity_guard_service import IntegrityGuardService
from posta.application.services.journey_graph_service import JourneyGraphService
from posta.application.services.ledger_service import LedgerService
from posta.domain.errors.integrity import DeviceBlacklistedError, IntegrityViolationError
from posta.domain.errors.sequence import SequenceViolationError
from posta.domain.errors.system import EscalatedToHumanReviewError
from posta.domain.errors.validation import TaskNotInPathError, ValidationError
from posta.domain.exceptions import PostaError
from posta.domain.models.audit_record import AuditDraft, AuditRecord, CaseAction
from posta.domain.models.case import (
    Case,
    CaseTrailEntry,
    GeoPoint,
    RoutingStatus,
    VerificationStatus,
)
from posta.domain.models.integrity_flag import IntegrityFlag, has_blocking_flag
from posta.domain.models.journey import Journey
from posta.infrastructure.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
)

_WHITESPACE = re.compile(r"\s+")

# Keywords that mark a submission as coming from a partner organization.
NGO_PARTNER_KEYWORDS: tuple[str, ...] = ("student", "organization")


class SubmitterRole(Enum):
    """Who appears to be writing the message."""

    AUTHOR = "AUTHOR"
    NGO_PARTNER = "NGO_PARTNER"


@dataclass(frozen=True)
class SubmitterContext:
    """Submitter role inferred from the message text."""

    role: SubmitterRole
    is_implicit: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role.value, "is_implicit": self.is_implicit}


@dataclass(frozen=True)
class IntakeRequest:
    """One submission as received from the transport.

    Attributes:
        message: Raw message text.
        beneficiary_id: Who the aid is for.
        task_code: Journey task the claim advances.
        device_id: Submitting device, when known.
        transaction_id: Transport transaction id, kept for traceability.
        author_id: Submitter; defaults to the beneficiary.
        goal_tags: Declared goals; default to the task's track goal.
        location: Where the aid is needed.
        preferred_body_id: Execution body requested by the author.
    """

    message: str
    beneficiary_id: str
    task_code: str
    device_id: Optional[str] = None
    transaction_id: Optional[str] = None
    author_id: Optional[str] = None
    goal_tags: tuple[str, ...] = ()
    location: Optional[GeoPoint] = None
    preferred_body_id: Optional[str] = None


@dataclass(frozen=True)
class IntakeResult:
    """Outcome of a successful submission."""

    case: Case
    flags: list[IntegrityFlag]
    context: SubmitterContext
    outcome_message: str
    audit_record: AuditRecord
    journey: Journey
    transaction_id: Optional[str] = None
    localized: Optional[LocalizedText] = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "message": self.outcome_message,
            "context": self.context.to_dict(),
            "flags": [flag.to_dict() for flag in self.flags],
            "audit": self.audit_record.to_dict(),
            "case": self.case.to_dict(),
            "journey": self.journey.to_dict(),
        }


def sanitize_description(message: str) -> str:
    """Trim and collapse runs of whitespace to single spaces."""
    return _WHITESPACE.sub(" ", message.strip())


def detect_context(message: str) -> SubmitterContext:
    """Infer the submitter role from keywords in the message."""
    lowered = message.lower()
    if any(keyword in lowered for keyword in NGO_PARTNER_KEYWORDS):
        return SubmitterContext(role=SubmitterRole.NGO_PARTNER)
    return SubmitterContext(role=SubmitterRole.AUTHOR)


def outcome_message(case: Case, context: SubmitterContext) -> str:
    """Plain-language confirmation for the submitter."""
    if context.role is SubmitterRole.NGO_PARTNER:
        text = f"Case {case.case_id} has been recorded and queued for verification."
    else:
        text = "We have received your request. A local partner will review it soon."
    if case.verification_status is VerificationStatus.FLAGGED:
        text += " It will take a little longer because it needs an extra check."
    return text


class IntakeService(LoggingMixin):
    """Turns accepted submissions into cases."""

    def __init__(
        self,
        integrity_guard: IntegrityGuardService,
        journey_graph: JourneyGraphService,
        ledger: LedgerService,
        case_repository: CaseRepositoryProtocol,
        review_queue: HumanReviewQueueProtocol,
        time_authority: TimeAuthorityProtocol,
        localization: Optional[LocalizationProtocol] = None,
        classifier: Optional[GoalClassifierProtocol] = None,
    ) -> None:
        self._guard = integrity_guard
        self._journeys = journey_graph
        self._ledger = ledger
        self._cases = case_repository
        self._review_queue = review_queue
        self._time = time_authority
        self._localization = localization
        self._classifier = classifier
        self._init_logger(component="intake")

    async def submit(self, request: IntakeRequest) -> IntakeResult:
        """Screen, gate and record one submission.

        Raises:
            ValidationError: Missing identifiers, or task not in any track.
            DeviceBlacklistedError: The device is blacklisted.
            IntegrityViolationError: Any other HIGH severity flag.
            SequenceViolationError: A prerequisite task is not completed.
            EscalatedToHumanReviewError: An unexpected failure, queued for review.
        """
        with correlation_scope(request.transaction_id or generate_correlation_id()):
            return await self._submit_logged(request)

    async def _submit_logged(self, request: IntakeRequest) -> IntakeResult:
        log = self._log_operation(
            "submit",
            beneficiary_id=request.beneficiary_id,
            device_id=request.device_id,
            task_code=request.task_code,
            transaction_id=request.transaction_id,
        )
        try:
            return await self._submit(request)
        except PostaError as exc:
            log.info("intake_rejected", **exc.to_dict())
            raise
        except Exception as exc:
            log.exception("intake_failed")
            review_id = await self._review_queue.escalate(
                HumanReviewItem(
                    operation="intake",
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                    raised_at=self._time.now(),
                    context={
                        "beneficiary_id": request.beneficiary_id,
                        "device_id": request.device_id,
                        "task_code": request.task_code,
                        "transaction_id": request.transaction_id,
                    },
                )
            )
            raise EscalatedToHumanReviewError("intake", review_id) from exc

    async def _submit(self, request: IntakeRequest) -> IntakeResult:
        if not request.beneficiary_id:
            raise ValidationError("beneficiary_id")
        if not request.message:
            raise ValidationError("message", "No message provided")
        if not request.task_code:
            raise ValidationError("task_code")

        track = self._journeys.catalog.track_for_task(request.task_code)
        if track is None:
            raise TaskNotInPathError(request.task_code)

        flags = await self._guard.audit(
            request.beneficiary_id, request.message, request.device_id
        )
        if has_blocking_flag(flags):
            if await self._guard.is_blacklisted(request.device_id):
                raise DeviceBlacklistedError(
                    flags, request.beneficiary_id, request.device_id or ""
                )
            raise IntegrityViolationError(flags, request.beneficiary_id, request.device_id)

        decision = await self._journeys.can_advance(request.beneficiary_id, request.task_code)
        if not decision.allowed:
            raise SequenceViolationError(
                beneficiary_id=request.beneficiary_id,
                task_id=request.task_code,
                reason=decision.reason or "",
                blocking_task_id=decision.blocking_task_id,
            )

        localized: Optional[LocalizedText] = None
        text = request.message
        if self._localization is not None:
            localized = await self._localization.neutralize(request.message)
            text = localized.text

        now = self._time.now()
        author_id = request.author_id or request.beneficiary_id
        case = Case(
            case_id=f"case_{uuid4().hex[:8]}",
            beneficiary_id=request.beneficiary_id,
            author_id=author_id,
            description=sanitize_description(text),
            goal_tags=request.goal_tags or (track.goal_tag,),
            location=request.location,
            task_id=request.task_code,
            preferred_body_id=request.preferred_body_id,
            routing_status=RoutingStatus.UNASSIGNED,
            verification_status=(
                VerificationStatus.FLAGGED if flags else VerificationStatus.PENDING
            ),
            created_at=now,
        )

        record = await self._ledger.commit(
            AuditDraft(
                timestamp=now,
                case_id=case.case_id,
                action=CaseAction.INTAKE,
                actor_id=author_id,
                previous_state="NONE",
                new_state=RoutingStatus.UNASSIGNED.value,
            )
        )
        case.append_trail(
            CaseTrailEntry(
                action=CaseAction.INTAKE.value,
                actor_id=author_id,
                timestamp=now,
                note=request.transaction_id or "",
                content_hash=record.content_hash,
            )
        )
        await self._cases.save(case)

        journey = await self._journeys.complete_task(request.beneficiary_id, request.task_code)

        if self._classifier is not None:
            case.reporting_tags = await self._classifier.classify(case)
            await self._cases.save(case)

        context = detect_context(request.message)
        self._log_operation("submit", case_id=case.case_id).info(
            "case_created",
            beneficiary_id=case.beneficiary_id,
            verification_status=case.verification_status.value,
            flags=len(flags),
            role=context.role.value,
        )
        return IntakeResult(
            case=case,
            flags=flags,
            context=context,
            outcome_message=outcome_message(case, context),
            audit_record=record,
            journey=journey,
            transaction_id=request.transaction_id,
            localized=localized,
        )
