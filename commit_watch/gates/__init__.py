from .models import FORMAT_GATE, TEST_GATE, GateResult, GateResults, GateStatus
from .render import render_diff_html
from .runner import GateRunner, classify_test_exit, run_format_gate, run_test_gate

__all__ = [
    "FORMAT_GATE",
    "TEST_GATE",
    "GateResult",
    "GateResults",
    "GateStatus",
    "render_diff_html",
    "GateRunner",
    "classify_test_exit",
    "run_format_gate",
    "run_test_gate",
]
