"""Assignment of accepted cases to execution bodies.

RoutingService.assign applies the pure selection rules in
posta.domain.services.routing, then records the outcome: the case becomes
ASSIGNED, one VerificationRecord is opened per declared goal tag, and a
ROUTED record is committed to the ledger. A case that is already ASSIGNED
is returned unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from posta.application.ports.case_repository import CaseRepositoryProtocol
from posta.application.ports.time_authority import TimeAuthorityProtocol
from posta.application.services.base import LoggingMixin
from posta.application.services.keyed_lock import KeyedLock
from posta.application.services.ledger_service import LedgerService
from posta.config.governance_config import ConsensusConfig, RoutingConfig
from posta.domain.models.audit_record import AuditDraft, CaseAction
from posta.domain.models.case import Case, CaseTrailEntry, RoutingStatus, VerificationRecord
from posta.domain.models.execution_body import ExecutionBody
from posta.domain.services.routing import RoutingDecision, select_body

ROUTING_ACTOR = "SYSTEM:RoutingService"


class RoutingService(LoggingMixin):
    """Routes cases and opens their verification records."""

    def __init__(
        self,
        ledger: LedgerService,
        case_repository: CaseRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        routing_config: Optional[RoutingConfig] = None,
        consensus_config: Optional[ConsensusConfig] = None,
    ) -> None:
        self._ledger = ledger
        self._cases = case_repository
        self._time = time_authority
        self._routing = routing_config or RoutingConfig()
        self._consensus = consensus_config or ConsensusConfig()
        self._locks = KeyedLock()
        self._init_logger(component="routing")

    def decide(self, case: Case, bodies: Sequence[ExecutionBody]) -> RoutingDecision:
        """Explain which body the case would be routed to, without side effects."""
        return select_body(
            case,
            bodies,
            fallback_body_id=self._routing.fallback_body_id,
            trust_threshold=self._routing.trust_threshold,
        )

    async def assign(self, case: Case, bodies: Sequence[ExecutionBody]) -> Case:
        """Route a case and record the assignment.

        Args:
            case: An UNASSIGNED case.
            bodies: Candidate bodies from the external registry.

        Returns:
            The same case, now ASSIGNED with open verification records.
        """
        async with self._locks.hold(case.case_id):
            if case.routing_status is RoutingStatus.ASSIGNED:
                return case

            decision = self.decide(case, bodies)
            now = self._time.now()

            # The case is only changed once the ROUTED record is durable.
            record = await self._ledger.commit(
                AuditDraft(
                    timestamp=now,
                    case_id=case.case_id,
                    action=CaseAction.ROUTED,
                    actor_id=ROUTING_ACTOR,
                    previous_state=case.routing_status.value,
                    new_state=RoutingStatus.ASSIGNED.value,
                )
            )

            case.assigned_body_id = decision.body_id
            case.routing_status = RoutingStatus.ASSIGNED
            for goal_tag in case.goal_tags:
                case.verification_records.setdefault(
                    goal_tag,
                    VerificationRecord(
                        goal_tag=goal_tag,
                        required_verifiers=self._consensus.required_verifiers,
                        routed_at=now,
                    ),
                )
            case.append_trail(
                CaseTrailEntry(
                    action=CaseAction.ROUTED.value,
                    actor_id=ROUTING_ACTOR,
                    timestamp=now,
                    note=f"{decision.body_id} ({decision.reason.value})",
                    content_hash=record.content_hash,
                )
            )
            await self._cases.save(case)

        log = self._log_operation("assign", case_id=case.case_id)
        if decision.is_fallback:
            log.warning("case_routed_to_fallback", **decision.to_dict())
        else:
            log.info("case_routed", **decision.to_dict())
        return case
