"""
Settings shared by the three dashboards and the scripts.

Each classifier method is registered once here with its display name, the
file it is built from and whether input text should be lowercased before
explaining. Paths can be overridden with SENTIMENT_<METHOD>_PATH, e.g.
    SENTIMENT_FASTTEXT_PATH=models/fasttext/sst5.bin streamlit run app/streamlit_app.py
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

CLASS_NAMES = [1, 2, 3, 4, 5]

SST_TRAIN = "data/sst/sst_train.txt"
SST_DEV = "data/sst/sst_dev.txt"
SST_TEST = "data/sst/sst_test.txt"


class UnknownMethodError(KeyError):
    pass


@dataclass(frozen=True)
class MethodConfig:
    key: str
    name: str
    path: Optional[str]
    lowercase: bool


# key -> (display name, default path, lowercase)
_DEFAULTS = {
    "textblob": ("TextBlob", None, False),
    "vader": ("VADER", None, False),
    "logistic": ("Logistic Regression", SST_TRAIN, True),
    "svm": ("Support Vector Machine", SST_TRAIN, True),
    "fasttext": ("FastText", "models/fasttext/sst5_hyperopt.bin", False),
    "transformer": ("Transformer", "nlptown/bert-base-multilingual-uncased-sentiment", False),
}


def _env_path(key: str, default: Optional[str]) -> Optional[str]:
    return os.getenv(f"SENTIMENT_{key.upper()}_PATH", default)


def methods() -> Dict[str, MethodConfig]:
    """All registered methods, in display order, with env overrides applied."""
    return {
        key: MethodConfig(key=key, name=name, path=_env_path(key, path), lowercase=lower)
        for key, (name, path, lower) in _DEFAULTS.items()
    }


def method_keys() -> List[str]:
    return list(_DEFAULTS)


def get_method(key: str) -> MethodConfig:
    try:
        return methods()[key]
    except KeyError:
        raise UnknownMethodError(f"Unknown method '{key}'. Choose one of: {', '.join(_DEFAULTS)}") from None


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


# --------------- Web settings ---------------
HOST = os.getenv("HOST", "127.0.0.1")
PORT = _env_int("PORT", 8050)
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
DEFAULT_METHOD = os.getenv("DEFAULT_METHOD", "textblob")
DEFAULT_NUM_SAMPLES = _env_int("DEFAULT_NUM_SAMPLES", 1000)
MAX_NUM_SAMPLES = _env_int("MAX_NUM_SAMPLES", 5000)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
