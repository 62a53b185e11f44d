"""
Cash Dispenser Interface

Interface Contract:
  - dispense(amount) → bool (True: 지급 완료, False: 하드웨어 실패)
  - Implementations: FakeCashDispenser (test/simulation)
  - 상태 결정은 하지 않는다 (cash_inside는 State Machine이 관리)
"""

from typing import Protocol


class CashDispenser(Protocol):
    """
    Cash Dispenser (Protocol)

    DispenseIntent 실행 대상
    """

    def dispense(self, amount: int) -> bool:
        """amount 만큼 현금 지급"""
        ...
