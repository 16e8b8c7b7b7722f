"""
State Machines

거래(Transaction) 생명주기 상태 전이 관리.

    CREATED ──수정──▶ EDITED ──수정──▶ EDITED
       │                 │
       └──무효 처리──▶ VOIDED ◀──┘

VOIDED는 종료 상태. 물리 삭제 전이는 존재하지 않음.
"""

import logging
from enum import Enum
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class StateMachineError(Exception):
    """허용되지 않은 상태 전이"""
    pass


class TransactionState(str, Enum):
    """거래 상태"""
    CREATED = "CREATED"
    EDITED = "EDITED"
    VOIDED = "VOIDED"


def _state_value(state: str | TransactionState) -> str:
    return state.value if isinstance(state, TransactionState) else str(state).upper()


class TransactionStateMachine:
    """거래 상태 머신

    저장된 행에서 현재 상태를 복원하여 수정/무효 처리 허용 여부 판단.

    Args:
        initial_state: 초기 상태 (기본 CREATED)
    """

    TRANSITIONS: dict[str, frozenset[str]] = {
        TransactionState.CREATED.value: frozenset({TransactionState.EDITED.value, TransactionState.VOIDED.value}),
        TransactionState.EDITED.value: frozenset({TransactionState.EDITED.value, TransactionState.VOIDED.value}),
        TransactionState.VOIDED.value: frozenset(),
    }

    def __init__(self, initial_state: str | TransactionState = TransactionState.CREATED):
        state = _state_value(initial_state)
        if state not in self.TRANSITIONS:
            raise StateMachineError(f"Unknown transaction state: {state}")
        self._state = state
        self._history: list[tuple[str, str]] = []

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "TransactionStateMachine":
        """저장된 거래 행에서 상태 복원

        is_voided → VOIDED, updated_at != created_at → EDITED, 그 외 CREATED
        """
        if record.get("is_voided"):
            return cls(TransactionState.VOIDED)
        updated_at = record.get("updated_at")
        if updated_at and updated_at != record.get("created_at"):
            return cls(TransactionState.EDITED)
        return cls(TransactionState.CREATED)

    @property
    def state(self) -> str:
        return self._state

    @property
    def history(self) -> list[tuple[str, str]]:
        """(이전 상태, 새 상태) 전이 이력"""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return not self.TRANSITIONS[self._state]

    @property
    def is_editable(self) -> bool:
        return self.can_transition(TransactionState.EDITED)

    def can_transition(self, to_state: str | TransactionState) -> bool:
        return _state_value(to_state) in self.TRANSITIONS[self._state]

    def transition(self, to_state: str | TransactionState) -> str:
        """상태 전이

        Returns:
            새 상태

        Raises:
            StateMachineError: 허용되지 않은 전이 (VOIDED 이후 전이 포함)
        """
        target = _state_value(to_state)
        if not self.can_transition(target):
            raise StateMachineError(f"Transaction cannot move from {self._state} to {target}")

        self._history.append((self._state, target))
        logger.debug(f"거래 상태 전이: {self._state} → {target}")
        self._state = target
        return target
