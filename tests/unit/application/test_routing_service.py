"""Unit tests for RoutingService.assign."""

import pytest

from posta.domain.models.audit_record import CaseAction
from posta.domain.models.case import GeoPoint, RoutingStatus
from posta.infrastructure.stubs.ledger_store_stub import LedgerStoreStub
from tests.helpers.factories import LedgerHarness, make_body, make_case


@pytest.fixture
def harness() -> LedgerHarness:
    """Provide routing and ledger over in-memory adapters."""
    return LedgerHarness()


class TestAssign:
    """Tests for assignment side effects."""

    @pytest.mark.asyncio
    async def test_assign_routes_and_opens_records(self, harness: LedgerHarness) -> None:
        case = make_case(goal_tags=("SDG_4", "SDG_5"), location=GeoPoint(0, 0))
        body = make_body("ngo_a", capabilities=("SDG_4", "SDG_5"))

        await harness.routing.assign(case, [body])

        assert case.routing_status is RoutingStatus.ASSIGNED
        assert case.assigned_body_id == "ngo_a"
        assert set(case.verification_records) == {"SDG_4", "SDG_5"}
        record = case.record_for("SDG_4")
        assert record.required_verifiers == 2
        assert record.routed_at == harness.time.now()
        assert await harness.cases.get(case.case_id) is case

    @pytest.mark.asyncio
    async def test_assign_commits_routed_record(self, harness: LedgerHarness) -> None:
        case = make_case()
        await harness.routing.assign(case, [make_body("ngo_a")])

        trail = await harness.ledger.get_audit_trail(case.case_id)

        assert len(trail) == 1
        assert trail[0].action is CaseAction.ROUTED
        assert trail[0].previous_state == "UNASSIGNED"
        assert trail[0].new_state == "ASSIGNED"
        assert case.audit_trail[-1].content_hash == trail[0].content_hash

    @pytest.mark.asyncio
    async def test_fallback_still_assigned(self, harness: LedgerHarness) -> None:
        case = make_case()
        await harness.routing.assign(case, [make_body("weak", trust_score=0.1)])

        assert case.routing_status is RoutingStatus.ASSIGNED
        assert case.assigned_body_id == "KHALISTAR"

    @pytest.mark.asyncio
    async def test_already_assigned_unchanged(self, harness: LedgerHarness) -> None:
        case = make_case()
        await harness.routing.assign(case, [make_body("ngo_a")])
        await harness.routing.assign(case, [make_body("ngo_b", trust_score=1.0)])

        assert case.assigned_body_id == "ngo_a"
        assert len(await harness.ledger.get_audit_trail(case.case_id)) == 1

    @pytest.mark.asyncio
    async def test_decide_has_no_side_effects(self, harness: LedgerHarness) -> None:
        case = make_case()
        decision = harness.routing.decide(case, [make_body("ngo_a")])

        assert decision.body_id == "ngo_a"
        assert case.routing_status is RoutingStatus.UNASSIGNED
        assert await harness.ledger.get_audit_trail(case.case_id) == []

    @pytest.mark.asyncio
    async def test_failed_commit_leaves_case_unassigned(self) -> None:
        store = LedgerStoreStub()
        harness = LedgerHarness(store=store)
        case = make_case()
        store.fail_on(CaseAction.ROUTED)

        with pytest.raises(OSError):
            await harness.routing.assign(case, [make_body("ngo_a")])

        assert case.routing_status is RoutingStatus.UNASSIGNED
        assert case.assigned_body_id is None
        assert case.verification_records == {}
        assert case.audit_trail == []

        await harness.routing.assign(case, [make_body("ngo_a")])

        trail = await harness.ledger.get_audit_trail(case.case_id)
        assert [r.action for r in trail] == [CaseAction.ROUTED]
        assert case.assigned_body_id == "ngo_a"
