"""Multi-verifier consensus on case goals.

Each declared goal tag of a case has its own quorum of distinct, non-author
verifiers. When a goal's quorum is met its record reaches consensus; when
every goal has consensus the case becomes VERIFIED.

Ledger commits:
- CONSENSUS_REACHED when a goal completes while other goals are still open
- VERIFIED when the last goal completes

Calls for one case are serialized under that case's lock.
"""

from __future__ import annotations

from datetime import datetime

from posta.application.ports.case_repository import CaseRepositoryProtocol
from posta.application.ports.time_authority import TimeAuthorityProtocol
from posta.application.services.base import LoggingMixin
from posta.application.services.keyed_lock import KeyedLock
from posta.application.services.ledger_service import LedgerService
from posta.domain.errors.consensus import SelfVerificationError, VerificationTargetNotFoundError
from posta.domain.errors.validation import ValidationError
from posta.domain.models.audit_record import VERIFIER_APPROVED, AuditDraft, CaseAction
from posta.domain.models.case import Case, CaseTrailEntry, VerificationStatus


class ConsensusVerifierService(LoggingMixin):
    """Records verifier approvals and detects consensus."""

    def __init__(
        self,
        ledger: LedgerService,
        case_repository: CaseRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._ledger = ledger
        self._cases = case_repository
        self._time = time_authority
        self._locks = KeyedLock()
        self._init_logger(component="consensus")

    async def record_verification(self, case: Case, verifier_id: str, goal_tag: str) -> Case:
        """Record one verifier's approval of one goal of a case.

        Approvals after consensus, and repeat approvals by the same verifier,
        leave the case unchanged.

        Raises:
            ValidationError: If verifier_id is missing.
            VerificationTargetNotFoundError: If the case has no record for goal_tag.
            SelfVerificationError: If the verifier is the case author.
        """
        if not verifier_id:
            raise ValidationError("verifier_id")
        log = self._log_operation(
            "record_verification",
            case_id=case.case_id,
            verifier_id=verifier_id,
            goal_tag=goal_tag,
        )

        async with self._locks.hold(case.case_id):
            record = case.record_for(goal_tag)
            if record is None:
                raise VerificationTargetNotFoundError(case.case_id, goal_tag)
            if verifier_id == case.author_id:
                log.warning("self_verification_rejected")
                raise SelfVerificationError(case.case_id, verifier_id)
            if record.consensus_reached:
                return case
            if verifier_id in record.received_verifications:
                return case

            now = self._time.now()
            # Commit before touching the case; a failed commit leaves it unchanged.
            consensus_draft = None
            committed = None
            if record.verification_count + 1 >= record.required_verifiers:
                consensus_draft = self._consensus_draft(case, verifier_id, goal_tag, now)
                committed = await self._ledger.commit(consensus_draft)

            record.add_verifier(verifier_id)
            case.append_trail(
                CaseTrailEntry(
                    action=VERIFIER_APPROVED,
                    actor_id=verifier_id,
                    timestamp=now,
                    note=goal_tag,
                )
            )
            log.info(
                "verification_recorded",
                received=record.verification_count,
                required=record.required_verifiers,
            )

            if consensus_draft is not None and committed is not None:
                record.mark_consensus(now)
                event = "goal_consensus_reached"
                if consensus_draft.action is CaseAction.VERIFIED:
                    case.verification_status = VerificationStatus.VERIFIED
                    event = "case_verified"
                case.append_trail(
                    CaseTrailEntry(
                        action=consensus_draft.action.value,
                        actor_id=verifier_id,
                        timestamp=now,
                        note=goal_tag,
                        content_hash=committed.content_hash,
                    )
                )
                log.info(event)

            await self._cases.save(case)
        return case

    def _consensus_draft(
        self, case: Case, verifier_id: str, goal_tag: str, now: datetime
    ) -> AuditDraft:
        """Ledger draft for the goal whose quorum this approval completes.

        VERIFIED when every other goal already has consensus, otherwise
        CONSENSUS_REACHED for this goal. previous_state is the case's current
        verification status (PENDING, or FLAGGED for cases with LOW flags).
        """
        others_done = all(
            other.consensus_reached
            for tag, other in case.verification_records.items()
            if tag != goal_tag
        )
        if others_done:
            action = CaseAction.VERIFIED
            new_state = VerificationStatus.VERIFIED.value
        else:
            action = CaseAction.CONSENSUS_REACHED
            new_state = f"{goal_tag}:{CaseAction.CONSENSUS_REACHED.value}"
        return AuditDraft(
            timestamp=now,
            case_id=case.case_id,
            action=action,
            actor_id=verifier_id,
            previous_state=case.verification_status.value,
            new_state=new_state,
        )
