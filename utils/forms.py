"""
Parsing of the (text, sample count, method) form the dashboards submit.

Every front end sends raw widget values; parse_submission() turns them into a
Submission or raises InvalidSubmission with a message fit to show the user.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from utils import config


class InvalidSubmission(ValueError):
    pass


@dataclass(frozen=True)
class Submission:
    text: str
    num_samples: int
    method: str

    @property
    def method_config(self) -> config.MethodConfig:
        return config.get_method(self.method)


def _parse_num_samples(value: Any, max_samples: int) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidSubmission("Please enter the number of samples to generate.")
    if isinstance(value, bool):
        raise InvalidSubmission("Number of samples must be a whole number.")
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise InvalidSubmission("Number of samples must be a whole number.") from None
    if not as_float.is_integer():
        raise InvalidSubmission("Number of samples must be a whole number.")
    n = int(as_float)
    if not 1 <= n <= max_samples:
        raise InvalidSubmission(f"Number of samples must be between 1 and {max_samples}.")
    return n


def parse_submission(text: Optional[str], num_samples: Any, method: Optional[str],
                     max_samples: Optional[int] = None) -> Submission:
    if text is None or not str(text).strip():
        raise InvalidSubmission("Please enter some text to explain.")
    n = _parse_num_samples(num_samples, max_samples or config.MAX_NUM_SAMPLES)
    if method not in config.method_keys():
        raise InvalidSubmission(f"Unknown classifier '{method}'.")
    return Submission(text=str(text).strip(), num_samples=n, method=method)
