"""
FakeCashDispenser — 테스트용 현금 지급기 시뮬레이터

목적:
1. dispense 호출 기록 (oracle 테스트용)
2. 실패 주입 (jam, 지폐 부족)
3. 지급 총액 추적
"""

import time
from typing import Any, Dict, List, Tuple


class FakeCashDispenser:
    """
    테스트용 현금 지급기

    특징:
    - 호출 기록: (method, ts, params)
    - inject_jam=True 이면 dispense() → False
    """

    def __init__(self):
        self.total_dispensed = 0
        self.calls: List[Tuple[str, float, Dict[str, Any]]] = []

        # 실패 주입 플래그
        self.inject_jam: bool = False

    def dispense(self, amount: int) -> bool:
        self.calls.append(("dispense", time.time(), {"amount": amount}))

        if self.inject_jam:
            return False

        self.total_dispensed += amount
        return True

    def get_calls(self, method: str) -> List[Dict[str, Any]]:
        """특정 method 호출 params 목록"""
        return [params for name, _, params in self.calls if name == method]
