"""Gates — индивидуальные гейты допуска переводов.

- GATE 0: Restriction master switch
- GATE 1: Owner exemption
- GATE 2: Trading window (pre-launch lockout)
- GATE 3: Per-transaction cap (whitelist override)
- GATE 4: Throttle window (unthrottle/whitelist override)
"""

from .verdict import GateVerdict
from .gate_00_restriction_switch import Gate00RestrictionSwitch, Gate00Result
from .gate_01_owner_exemption import Gate01OwnerExemption, Gate01Result
from .gate_02_trading_window import Gate02TradingWindow, Gate02Result
from .gate_03_transfer_cap import Gate03TransferCap, Gate03Result
from .gate_04_throttle import Gate04Throttle, Gate04Result

__all__ = [
    "GateVerdict",
    "Gate00RestrictionSwitch",
    "Gate00Result",
    "Gate01OwnerExemption",
    "Gate01Result",
    "Gate02TradingWindow",
    "Gate02Result",
    "Gate03TransferCap",
    "Gate03Result",
    "Gate04Throttle",
    "Gate04Result",
]
