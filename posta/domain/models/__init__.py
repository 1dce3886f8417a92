"""Domain models for the Posta governance core."""

from posta.domain.models.audit_record import AuditDraft, AuditRecord, CaseAction
from posta.domain.models.case import (
    Case,
    CaseTrailEntry,
    GeoPoint,
    RoutingStatus,
    VerificationRecord,
    VerificationStatus,
)
from posta.domain.models.execution_body import ExecutionBody
from posta.domain.models.integrity_flag import (
    DuplicateClaimFlag,
    FlagSeverity,
    FlagType,
    IdentityMismatchFlag,
    IntegrityFlag,
    SuspiciousToneFlag,
)
from posta.domain.models.journey import AdvanceDecision, Journey, Task, TaskCatalog, TaskTrack

__all__: list[str] = [
    "AdvanceDecision",
    "AuditDraft",
    "AuditRecord",
    "Case",
    "CaseAction",
    "CaseTrailEntry",
    "DuplicateClaimFlag",
    "ExecutionBody",
    "FlagSeverity",
    "FlagType",
    "GeoPoint",
    "IdentityMismatchFlag",
    "IntegrityFlag",
    "Journey",
    "RoutingStatus",
    "SuspiciousToneFlag",
    "Task",
    "TaskCatalog",
    "TaskTrack",
    "VerificationRecord",
    "VerificationStatus",
]
