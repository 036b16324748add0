"""
Shared fixtures: a keyword predictor standing in for the real models, and a
tiny SST-5 training file.
"""
import numpy as np
import pytest

from utils import explain


class KeywordPredictor:
    """Class 3 plus one per 'good', minus one per 'bad'. Records every batch it sees."""

    def __init__(self):
        self.calls = []

    def predict(self, texts):
        texts = list(texts)
        self.calls.append(texts)
        out = []
        for t in texts:
            words = t.split()
            cls = min(5, max(1, 3 + words.count("good") - words.count("bad")))
            p = np.full(5, 0.05)
            p[cls - 1] = 0.8
            out.append(p)
        return np.array(out)


SST_LINES = [
    "__label__1\tan utterly awful , boring mess .",
    "__label__1\tterrible acting and a dreadful script .",
    "__label__2\tit 's not very good , and too long .",
    "__label__2\ta dull and disappointing film .",
    "__label__3\tthe film runs two hours .",
    "__label__3\tit is a movie about a family .",
    "__label__4\ta good , solid piece of work .",
    "__label__4\tenjoyable and well made .",
    "__label__5\ta gorgeous , witty , seductive movie .",
    "__label__5\tbrilliant , moving and wonderful .",
]


@pytest.fixture
def fake_predictor():
    return KeywordPredictor()


@pytest.fixture
def patched_predictor(monkeypatch, fake_predictor):
    """Route every method to the keyword predictor."""
    monkeypatch.setattr(explain, "get_predictor", lambda method, path=None: fake_predictor)
    return fake_predictor


@pytest.fixture
def sst_file(tmp_path):
    path = tmp_path / "sst_train.txt"
    path.write_text("\n".join(SST_LINES) + "\n", encoding="utf-8")
    return str(path)
