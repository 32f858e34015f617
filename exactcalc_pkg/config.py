"""Centralized configuration for exactcalc.

This module defines:
- Size limits for exact rational arithmetic
- Comparison tolerances and precision margins for constructive reals
- Input limits for numeric literal entry
- Worker timeouts and output formatting defaults

Configuration can be overridden via:
- CLI flags (see cli/app.py)
- Environment variables (prefixed with EXACTCALC_)
"""

import os

VERSION = "1.0.0"

# Exact arithmetic limits
MAX_RATIONAL_BITS = int(
    os.getenv("EXACTCALC_MAX_RATIONAL_BITS", "10000")
)  # numerator + denominator bits before a rational is "too complex"
HARD_RECURSIVE_POW_LIMIT_BITS = int(
    os.getenv("EXACTCALC_HARD_RECURSIVE_POW_LIMIT_BITS", "1000")
)  # exponent bit length beyond which rational pow gives up
RECURSIVE_POW_LIMIT = int(
    os.getenv("EXACTCALC_RECURSIVE_POW_LIMIT", "1000")
)  # integer exponents above this go through exp(ln(x) * n)
MAX_FACTORIAL_BITS = int(
    os.getenv("EXACTCALC_MAX_FACTORIAL_BITS", "20")
)  # factorial argument must fit in this many bits

# Constructive real tolerances
DEFAULT_COMPARE_TOLERANCE = int(
    os.getenv("EXACTCALC_DEFAULT_COMPARE_TOLERANCE", "-1000")
)  # compare to within 2**tolerance
TRUNCATION_EXTRA_PREC = int(
    os.getenv("EXACTCALC_TRUNCATION_EXTRA_PREC", "10")
)  # guard bits when truncation is not decidable

# Literal entry limits
MAX_CONSTANT_EXPONENT = int(
    os.getenv("EXACTCALC_MAX_CONSTANT_EXPONENT", "10000")
)  # refuse further exponent digits beyond this magnitude
MAX_EXPONENT_CHARS = int(
    os.getenv("EXACTCALC_MAX_EXPONENT_CHARS", "8")
)  # longest pasted "E..." exponent accepted

# Worker configuration
WORKER_TIMEOUT = float(os.getenv("EXACTCALC_WORKER_TIMEOUT", "2"))  # seconds
WORKER_LONG_TIMEOUT = float(
    os.getenv("EXACTCALC_WORKER_LONG_TIMEOUT", "15")
)  # seconds, used for explicit "=" evaluation
WORKER_POOL_SIZE = int(os.getenv("EXACTCALC_WORKER_POOL_SIZE", "2"))

# Output
OUTPUT_DIGITS = int(
    os.getenv("EXACTCALC_OUTPUT_DIGITS", "20")
)  # digits after the decimal point in approximations
SHORT_REP_DIGITS = int(
    os.getenv("EXACTCALC_SHORT_REP_DIGITS", "8")
)  # digits kept in abbreviated PreEval display strings
LOG_LEVEL = os.getenv("EXACTCALC_LOG_LEVEL", "WARNING")
