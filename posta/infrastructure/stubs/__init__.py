"""Stub implementations of collaborator ports for development and testing."""

from posta.infrastructure.stubs.goal_classifier_stub import GoalClassifierStub
from posta.infrastructure.stubs.key_value_store_stub import KeyValueStoreStub
from posta.infrastructure.stubs.ledger_store_stub import LedgerStoreStub
from posta.infrastructure.stubs.localization_stub import LocalizationStub

__all__: list[str] = [
    "GoalClassifierStub",
    "KeyValueStoreStub",
    "LedgerStoreStub",
    "LocalizationStub",
]
