"""
Hardware Infrastructure (Cash Dispenser)

Exports:
- CashDispenser: Dispenser interface (Protocol)
- FakeCashDispenser: 테스트/시뮬레이션용 지급기
"""

from .dispenser_interface import CashDispenser
from .fake_dispenser import FakeCashDispenser

__all__ = ["CashDispenser", "FakeCashDispenser"]
