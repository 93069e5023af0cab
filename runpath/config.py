# runpath/config.py
"""
Run-length presets and default-bound resolution.

- ENV: RUNPATH_RUNS=standard|ultra|MIN..MAX
- CLI: --runs=standard|ultra|MIN..MAX  (wins over the environment)
"""

import os
import re
import sys
from typing import Dict, Mapping, Optional, Sequence, Tuple

from runpath.core.errors import InvalidConfiguration

PRESETS: Dict[str, Tuple[int, int]] = {
    "standard": (1, 3),
    "ultra":    (4, 10),
}
DEFAULT_PRESET = "standard"
ENV_VAR = "RUNPATH_RUNS"

_BOUNDS_RE = re.compile(r"^\s*(\d+)\s*(?:\.\.|-|:)\s*(\d+)\s*$")


def parse_run_bounds(text: str) -> Tuple[int, int]:
    """'ultra' -> (4, 10); '2..5' / '2-5' / '2:5' -> (2, 5)."""
    key = text.strip().lower()
    if key in PRESETS:
        return PRESETS[key]
    m = _BOUNDS_RE.match(key)
    if not m:
        raise InvalidConfiguration(
            f"run bounds must be one of {sorted(PRESETS)} or MIN..MAX, got {text!r}")
    lo, hi = int(m.group(1)), int(m.group(2))
    if lo < 1 or lo > hi:
        raise InvalidConfiguration(f"run bounds need 1 <= MIN <= MAX, got {lo}..{hi}")
    return lo, hi


def resolve_run_bounds(argv: Optional[Sequence[str]] = None,
                       environ: Optional[Mapping[str, str]] = None) -> Tuple[int, int]:
    argv = sys.argv if argv is None else argv
    environ = os.environ if environ is None else environ
    text = environ.get(ENV_VAR, DEFAULT_PRESET)
    for arg in argv:
        if arg.startswith("--runs="):
            text = arg.split("=", 1)[1]
    return parse_run_bounds(text)


def preset_name(bounds: Tuple[int, int]) -> str:
    for name, b in PRESETS.items():
        if b == tuple(bounds):
            return name
    return "custom"
