"""Unit tests for ConsensusVerifierService."""

import asyncio

import pytest

from posta.domain.errors.consensus import SelfVerificationError, VerificationTargetNotFoundError
from posta.domain.errors.validation import ValidationError
from posta.domain.models.audit_record import VERIFIER_APPROVED, CaseAction
from posta.domain.models.case import Case, VerificationStatus
from posta.infrastructure.stubs.ledger_store_stub import LedgerStoreStub
from tests.helpers.factories import LedgerHarness, make_body, make_case


@pytest.fixture
def harness() -> LedgerHarness:
    """Provide consensus, routing and ledger with a quorum of 2."""
    return LedgerHarness(required_verifiers=2)


async def _routed(harness: LedgerHarness, goal_tags: tuple[str, ...] = ("SDG_4",)) -> Case:
    case = make_case(goal_tags=goal_tags, author_id="ben_1")
    body = make_body("ngo_a", capabilities=("SDG_4", "SDG_5"))
    return await harness.routing.assign(case, [body])


class TestQuorum:
    """Tests for quorum counting."""

    @pytest.mark.asyncio
    async def test_below_quorum_no_consensus(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)

        await harness.consensus.record_verification(case, "v1", "SDG_4")

        record = case.record_for("SDG_4")
        assert record.received_verifications == ["v1"]
        assert not record.consensus_reached
        assert case.verification_status is VerificationStatus.PENDING

    @pytest.mark.asyncio
    async def test_quorum_verifies_case(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)

        await harness.consensus.record_verification(case, "v1", "SDG_4")
        await harness.consensus.record_verification(case, "v2", "SDG_4")

        assert case.record_for("SDG_4").consensus_reached
        assert case.is_verified
        trail = await harness.ledger.get_audit_trail(case.case_id)
        assert [r.action for r in trail] == [CaseAction.ROUTED, CaseAction.VERIFIED]
        assert trail[-1].previous_state == "PENDING"
        assert trail[-1].new_state == "VERIFIED"
        assert trail[-1].actor_id == "v2"

    @pytest.mark.asyncio
    async def test_after_consensus_is_noop(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)
        await harness.consensus.record_verification(case, "v1", "SDG_4")
        await harness.consensus.record_verification(case, "v2", "SDG_4")

        await harness.consensus.record_verification(case, "v3", "SDG_4")

        assert case.record_for("SDG_4").received_verifications == ["v1", "v2"]
        assert len(await harness.ledger.get_audit_trail(case.case_id)) == 2

    @pytest.mark.asyncio
    async def test_repeat_verifier_counted_once(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)
        await harness.consensus.record_verification(case, "v1", "SDG_4")
        await harness.consensus.record_verification(case, "v1", "SDG_4")

        assert case.record_for("SDG_4").verification_count == 1
        assert not case.is_verified
        approvals = [e for e in case.audit_trail if e.action == VERIFIER_APPROVED]
        assert len(approvals) == 1

    @pytest.mark.asyncio
    async def test_quorum_is_per_goal(self, harness: LedgerHarness) -> None:
        case = await _routed(harness, goal_tags=("SDG_4", "SDG_5"))

        await harness.consensus.record_verification(case, "v1", "SDG_4")
        await harness.consensus.record_verification(case, "v2", "SDG_4")

        assert not case.is_verified
        trail = await harness.ledger.get_audit_trail(case.case_id)
        assert trail[-1].action is CaseAction.CONSENSUS_REACHED
        assert trail[-1].new_state == "SDG_4:CONSENSUS_REACHED"

        await harness.consensus.record_verification(case, "v1", "SDG_5")
        await harness.consensus.record_verification(case, "v3", "SDG_5")

        assert case.is_verified
        trail = await harness.ledger.get_audit_trail(case.case_id)
        assert [r.action for r in trail] == [
            CaseAction.ROUTED,
            CaseAction.CONSENSUS_REACHED,
            CaseAction.VERIFIED,
        ]


class TestRejections:
    """Tests for structured rejections."""

    @pytest.mark.asyncio
    async def test_author_cannot_verify(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)
        with pytest.raises(SelfVerificationError):
            await harness.consensus.record_verification(case, "ben_1", "SDG_4")
        assert case.record_for("SDG_4").received_verifications == []

    @pytest.mark.asyncio
    async def test_author_rejected_even_after_consensus(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)
        await harness.consensus.record_verification(case, "v1", "SDG_4")
        await harness.consensus.record_verification(case, "v2", "SDG_4")

        with pytest.raises(SelfVerificationError):
            await harness.consensus.record_verification(case, "ben_1", "SDG_4")

    @pytest.mark.asyncio
    async def test_unknown_goal(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)
        with pytest.raises(VerificationTargetNotFoundError) as exc_info:
            await harness.consensus.record_verification(case, "v1", "SDG_9")
        assert exc_info.value.to_dict()["goal_tag"] == "SDG_9"

    @pytest.mark.asyncio
    async def test_unrouted_case_has_no_targets(self, harness: LedgerHarness) -> None:
        with pytest.raises(VerificationTargetNotFoundError):
            await harness.consensus.record_verification(make_case(), "v1", "SDG_4")

    @pytest.mark.asyncio
    async def test_missing_verifier(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)
        with pytest.raises(ValidationError):
            await harness.consensus.record_verification(case, "", "SDG_4")


class TestApprovalTrail:
    """Tests for the case-local approval trail."""

    @pytest.mark.asyncio
    async def test_each_approval_recorded(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)
        await harness.consensus.record_verification(case, "v1", "SDG_4")
        await harness.consensus.record_verification(case, "v2", "SDG_4")

        actions = [(e.action, e.actor_id) for e in case.audit_trail]
        assert actions == [
            ("ROUTED", "SYSTEM:RoutingService"),
            (VERIFIER_APPROVED, "v1"),
            (VERIFIER_APPROVED, "v2"),
            ("VERIFIED", "v2"),
        ]


class TestLedgerFailure:
    """A failed ledger commit leaves the case as it was."""

    @pytest.mark.asyncio
    async def test_failed_verified_commit_is_retryable(self) -> None:
        store = LedgerStoreStub()
        harness = LedgerHarness(store=store)
        case = await _routed(harness)
        await harness.consensus.record_verification(case, "v1", "SDG_4")
        store.fail_on(CaseAction.VERIFIED)

        with pytest.raises(OSError):
            await harness.consensus.record_verification(case, "v2", "SDG_4")

        record = case.record_for("SDG_4")
        assert record.received_verifications == ["v1"]
        assert not record.consensus_reached
        assert case.verification_status is VerificationStatus.PENDING

        await harness.consensus.record_verification(case, "v2", "SDG_4")

        assert case.is_verified
        trail = await harness.ledger.get_audit_trail(case.case_id)
        assert [r.action for r in trail] == [CaseAction.ROUTED, CaseAction.VERIFIED]
        approvals = [e.actor_id for e in case.audit_trail if e.action == VERIFIER_APPROVED]
        assert approvals == ["v1", "v2"]


class TestFlaggedCase:
    @pytest.mark.asyncio
    async def test_flagged_case_records_flagged_previous_state(
        self, harness: LedgerHarness
    ) -> None:
        case = make_case(goal_tags=("SDG_4",), author_id="ben_1")
        case.verification_status = VerificationStatus.FLAGGED
        await harness.routing.assign(case, [make_body("ngo_a")])

        await harness.consensus.record_verification(case, "v1", "SDG_4")
        await harness.consensus.record_verification(case, "v2", "SDG_4")

        trail = await harness.ledger.get_audit_trail(case.case_id)
        assert trail[-1].action is CaseAction.VERIFIED
        assert trail[-1].previous_state == "FLAGGED"
        assert case.is_verified


class TestConcurrentApprovals:
    """Approvals for one case are serialized under its lock."""

    @pytest.mark.asyncio
    async def test_racing_quorum_commits_verified_once(self, harness: LedgerHarness) -> None:
        case = await _routed(harness)

        await asyncio.gather(
            *(harness.consensus.record_verification(case, f"v{n}", "SDG_4") for n in range(5))
        )

        trail = await harness.ledger.get_audit_trail(case.case_id)
        assert [r.action for r in trail].count(CaseAction.VERIFIED) == 1
        assert case.record_for("SDG_4").received_verifications == ["v0", "v1"]
        assert case.is_verified
