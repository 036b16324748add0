"""
Tests for the predictors and the LIME wrapper
"""
import sys
import threading
import time
import types

import numpy as np
import pytest
from joblib import dump

from utils import explain


class FixedScore(explain.ScorePredictor):
    def score(self, text):
        return float(text)


class TestScorePredictor:

    @pytest.mark.parametrize("score, expected", [
        (-1.0, 1), (-0.7, 1), (-0.5, 2), (0.0, 3), (0.3, 4), (0.65, 5), (1.0, 5),
    ])
    def test_polarity_to_class(self, score, expected):
        assert FixedScore().to_class(score) == expected

    def test_simulated_probabilities_peak_on_class(self):
        probs = FixedScore().predict(["-1.0", "0.0", "1.0"])
        assert probs.shape == (3, 5)
        np.testing.assert_allclose(probs.sum(axis=1), 1.0)
        assert probs.argmax(axis=1).tolist() == [0, 2, 4]

    def test_textblob_predictor(self):
        probs = explain.TextBlobPredictor().predict(["What a wonderful, beautiful film", "the film"])
        assert probs.shape == (2, 5)
        assert probs[0].argmax() > probs[1].argmax()


def test_align_probabilities_fills_missing_classes():
    aligned = explain.align_probabilities(np.array([[0.2, 0.8]]), classes=[2, 5])
    assert aligned.tolist() == [[0.0, 0.2, 0.0, 0.0, 0.8]]


class TestSklearnPredictors:

    @pytest.mark.parametrize("cls", [explain.LogisticPredictor, explain.SVMPredictor])
    def test_fits_from_sst_file(self, cls, sst_file):
        probs = cls(sst_file).predict(["a brilliant and wonderful movie", "an awful , boring mess"])
        assert probs.shape == (2, 5)
        np.testing.assert_allclose(probs.sum(axis=1), 1.0)

    def test_loads_saved_pipeline(self, sst_file, tmp_path):
        fitted = explain.LogisticPredictor(sst_file)
        model_path = tmp_path / "model.joblib"
        dump(fitted.pipeline, model_path)
        loaded = explain.LogisticPredictor(str(model_path))
        texts = ["enjoyable and good"]
        np.testing.assert_allclose(loaded.predict(texts), fitted.predict(texts))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            explain.SVMPredictor(str(tmp_path / "nope.txt"))

    def test_no_path(self):
        with pytest.raises(ValueError):
            explain.LogisticPredictor(None)


class StubFastTextModel:
    def __init__(self):
        self.seen = None

    def predict(self, texts, k=1):
        self.seen = (texts, k)
        labels = [("__label__4", "__label__5", "__label__3", "__label__1", "__label__2")] * len(texts)
        probs = [np.array([0.6, 0.2, 0.1, 0.06, 0.04])] * len(texts)
        return labels, probs


class TestFastTextPredictor:

    @pytest.fixture
    def model(self, monkeypatch, tmp_path):
        stub = StubFastTextModel()
        monkeypatch.setitem(sys.modules, "fasttext", types.SimpleNamespace(load_model=lambda path: stub))
        path = tmp_path / "sst5.bin"
        path.write_bytes(b"")
        return stub, explain.FastTextPredictor(str(path))

    def test_labels_mapped_to_class_columns(self, model):
        _, predictor = model
        probs = predictor.predict(["a fine film"])
        assert probs.tolist() == [[0.06, 0.04, 0.1, 0.6, 0.2]]

    def test_newlines_flattened_and_all_classes_requested(self, model):
        stub, predictor = model
        predictor.predict(["first line\nsecond line", "one"])
        assert stub.seen == (["first line second line", "one"], 5)

    def test_missing_model(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            explain.FastTextPredictor(str(tmp_path / "missing.bin"))


def test_get_predictor_caches_per_method_and_path(sst_file):
    explain.clear_predictors()
    first = explain.get_predictor("logistic", sst_file)
    assert explain.get_predictor("logistic", sst_file) is first
    assert explain.get_predictor("svm", sst_file) is not first


def test_get_predictor_builds_once_across_threads(monkeypatch):
    """Concurrent first requests for a method share one predictor"""
    built = []

    class SlowPredictor:
        def __init__(self, path=None):
            time.sleep(0.3)
            built.append(self)

    explain.clear_predictors()
    monkeypatch.setitem(explain.PREDICTORS, "textblob", SlowPredictor)
    results = []
    threads = [
        threading.Thread(target=lambda: results.append(explain.get_predictor("textblob", None)))
        for _ in range(4)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    explain.clear_predictors()

    assert len(built) == 1
    assert len(results) == 4
    assert all(r is built[0] for r in results)


def test_get_predictor_unknown_method():
    with pytest.raises(ValueError, match="Unknown method"):
        explain.get_predictor("naive_bayes")


class TestExplainer:

    def test_returns_html_explanation_for_top_class(self, patched_predictor):
        exp = explain.explainer("textblob", None, "a good good film", num_samples=50, random_state=0)
        assert explain.top_label(exp) == 5
        html = explain.explanation_html(exp)
        assert html.startswith("<html>")
        assert "good" in html

    def test_perturbation_count_matches_num_samples(self, patched_predictor):
        explain.explainer("vader", None, "not a bad film", num_samples=40, random_state=0)
        assert sum(len(batch) for batch in patched_predictor.calls) == 40

    def test_lowercases_when_asked(self, patched_predictor):
        explain.explainer("logistic", "unused", "A GOOD Film", lowercase=True, num_samples=10, random_state=0)
        assert patched_predictor.calls[0][0] == "a good film"

    def test_keeps_case_by_default(self, patched_predictor):
        explain.explainer("fasttext", "unused", "A GOOD Film", num_samples=10, random_state=0)
        assert patched_predictor.calls[0][0] == "A GOOD Film"

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_text_rejected(self, patched_predictor, text):
        with pytest.raises(ValueError):
            explain.explainer("textblob", None, text)

    @pytest.mark.parametrize("n", [0, -3, 2.5, True])
    def test_num_samples_must_be_positive_integer(self, patched_predictor, n):
        with pytest.raises(ValueError):
            explain.explainer("textblob", None, "fine", num_samples=n)
        assert patched_predictor.calls == []

    def test_integral_float_num_samples_accepted(self, patched_predictor):
        explain.explainer("textblob", None, "a good film", num_samples=20.0, random_state=0)
        assert sum(len(batch) for batch in patched_predictor.calls) == 20

    def test_figure(self, patched_predictor):
        exp = explain.explainer("textblob", None, "a bad bad film", num_samples=30, random_state=0)
        fig = explain.explanation_figure(exp)
        assert fig.axes
