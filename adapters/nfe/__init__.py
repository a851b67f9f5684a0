"""
NF-e 어댑터

공급사 NF-e XML을 Purchase 이벤트로 변환.
"""

from adapters.nfe.parser import parse_nfe

__all__ = [
    "parse_nfe",
]
