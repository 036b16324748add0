"""
Explainability helpers shared by the Flask, Dash and Streamlit dashboards.

- Predictors: one wrapper per classifier method, all exposing
      predict(list[str]) -> np.ndarray of shape (n_texts, 5)
  where column i is the probability of sentiment class i + 1 (SST-5 labels).
    * rule-based:      TextBlob, VADER (continuous score -> simulated probabilities)
    * feature-based:   Logistic Regression, linear SVM (TF-IDF sklearn pipelines)
    * embedding-based: fastText, Hugging Face transformer
- explainer(): LIME text explanation around any of the predictors.

Usage examples (in a notebook or script):
    from utils.explain import explainer, predict_text

    exp = explainer("logistic", "data/sst/sst_train.txt", "It's not a bad film at all", lowercase=True, num_samples=500)
    html = exp.as_html()

    probs = predict_text("textblob", None, "What a wonderful, moving story")
"""

from __future__ import annotations
import logging
import os
import threading
from typing import Dict, Iterable, List, Optional, Type

import numpy as np
import matplotlib.pyplot as plt
from joblib import load
from scipy.stats import norm

# ----- LIME -----
from lime.lime_text import LimeTextExplainer

# ----- Feature-based models -----
from sklearn.pipeline import Pipeline
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.linear_model import LogisticRegression, SGDClassifier

# ----- Transformer inference -----
import torch
from transformers import AutoTokenizer, AutoModelForSequenceClassification
import torch.nn.functional as F

from utils.config import CLASS_NAMES
from utils.data_prep import LABEL_PREFIX, read_sst
from utils.text_clean import TextCleaner

logger = logging.getLogger(__name__)

NUM_CLASSES = len(CLASS_NAMES)
NUM_FEATURES = 20


def _as_list(texts) -> List[str]:
    if isinstance(texts, str):
        return [texts]
    return [str(t) for t in texts]


def align_probabilities(probs: np.ndarray, classes: Iterable) -> np.ndarray:
    """
    Scatter the columns of a classifier's predict_proba output into the fixed
    1..5 layout. Classes missing from the training data get probability 0.
    """
    probs = np.asarray(probs, dtype=float)
    out = np.zeros((probs.shape[0], NUM_CLASSES))
    for col, cls in enumerate(classes):
        out[:, int(cls) - 1] = probs[:, col]
    return out


# ---------- Rule-based predictors ----------

class ScorePredictor:
    """
    Base for lexicon scorers that return a single polarity in [-1, 1].

    The polarity is rescaled to [0, 1], binned into a class 1..5 and turned into
    a pseudo-probability vector with a normal pdf centred on that class.
    """
    classes = np.array(CLASS_NAMES)
    spread = 0.5

    def score(self, text: str) -> float:
        raise NotImplementedError

    def to_class(self, score: float) -> int:
        offset = (score + 1) / 2.0
        binned = np.digitize(NUM_CLASSES * offset, self.classes) + 1
        return int(np.clip(binned, 1, NUM_CLASSES))

    def simulate_probabilities(self, score: float) -> np.ndarray:
        pdf = norm.pdf(self.classes, self.to_class(score), scale=self.spread)
        return pdf / pdf.sum()

    def predict(self, texts) -> np.ndarray:
        return np.array([self.simulate_probabilities(self.score(t)) for t in _as_list(texts)])


class TextBlobPredictor(ScorePredictor):
    def __init__(self, path: Optional[str] = None):
        from textblob import TextBlob
        self.classifier = TextBlob

    def score(self, text: str) -> float:
        return self.classifier(text).sentiment.polarity


class VaderPredictor(ScorePredictor):
    def __init__(self, path: Optional[str] = None):
        import nltk
        try:
            nltk.data.find("sentiment/vader_lexicon.zip")
        except LookupError:
            nltk.download("vader_lexicon", quiet=True)
        from nltk.sentiment.vader import SentimentIntensityAnalyzer
        self.classifier = SentimentIntensityAnalyzer()

    def score(self, text: str) -> float:
        return self.classifier.polarity_scores(text)["compound"]


# ---------- Feature-based predictors ----------

def build_pipeline(method: str, seed: int = 42) -> Pipeline:
    """cleaner -> TF-IDF -> linear classifier, for the 'logistic' and 'svm' methods."""
    if method == "logistic":
        clf = LogisticRegression(max_iter=1000, random_state=seed)
    elif method == "svm":
        # modified_huber gives a linear SVM-style margin loss that still supports predict_proba
        clf = SGDClassifier(loss="modified_huber", penalty="l2", alpha=1e-3, max_iter=100, tol=None, random_state=seed)
    else:
        raise ValueError(f"No sklearn pipeline for method '{method}'")
    return Pipeline([
        ("clean", TextCleaner()),
        ("tfidf", TfidfVectorizer(ngram_range=(1, 2), min_df=1, token_pattern=r"(?u)[\w']+")),
        ("clf", clf),
    ])


class SklearnPredictor:
    """
    path is either a saved pipeline (*.joblib, see train_sklearn.py) or an SST-5
    training file, in which case the pipeline is fitted on construction.
    """
    method = ""

    def __init__(self, path: Optional[str]):
        if not path:
            raise ValueError(f"Method '{self.method}' needs a model or training file path.")
        if not os.path.exists(path):
            raise FileNotFoundError(f"{self.method} model/training file not found at {path}")

        if path.endswith(".joblib"):
            self.pipeline = load(path)
        else:
            train = read_sst(path)
            logger.info("Fitting %s pipeline on %s (%d sentences)", self.method, path, len(train))
            self.pipeline = build_pipeline(self.method)
            self.pipeline.fit(train["text"].tolist(), train["label"].tolist())

    def predict(self, texts) -> np.ndarray:
        probs = self.pipeline.predict_proba(_as_list(texts))
        return align_probabilities(probs, self.pipeline.classes_)


class LogisticPredictor(SklearnPredictor):
    method = "logistic"


class SVMPredictor(SklearnPredictor):
    method = "svm"


# ---------- Embedding-based predictors ----------

class FastTextPredictor:
    def __init__(self, path: Optional[str]):
        if not path or not os.path.exists(path):
            raise FileNotFoundError(f"fastText model not found at {path}")
        import fasttext
        self.model = fasttext.load_model(path)

    def predict(self, texts) -> np.ndarray:
        texts = [t.replace("\n", " ") for t in _as_list(texts)]
        labels, probs = self.model.predict(texts, k=NUM_CLASSES)
        out = np.zeros((len(texts), NUM_CLASSES))
        for row, (row_labels, row_probs) in enumerate(zip(labels, probs)):
            for label, p in zip(row_labels, row_probs):
                out[row, int(label.replace(LABEL_PREFIX, "")) - 1] = p
        return out


class TransformerPredictor:
    """
    Sequence classifier with 5 output labels, ordered from most negative to most
    positive (e.g. a model fine-tuned on SST-5 or 1-5 star reviews).
    """
    def __init__(self, path: Optional[str], device: str | None = None, max_len: int = 128, batch_size: int = 16):
        if not path:
            raise ValueError("Transformer method needs a model directory or hub id.")
        self.tokenizer = AutoTokenizer.from_pretrained(path)
        self.model = AutoModelForSequenceClassification.from_pretrained(path)
        if self.model.config.num_labels != NUM_CLASSES:
            raise ValueError(f"Expected a {NUM_CLASSES}-label model at {path}, got {self.model.config.num_labels}")
        self.model.eval()
        if device is None:
            device = "cuda" if torch.cuda.is_available() else "cpu"
        self.device = device
        self.model.to(self.device)
        self.max_len = max_len
        self.batch_size = batch_size

    @torch.no_grad()
    def predict(self, texts) -> np.ndarray:
        texts = _as_list(texts)
        out = []
        # LIME sends thousands of perturbations; keep batches small
        for i in range(0, len(texts), self.batch_size):
            chunk = texts[i:i + self.batch_size]
            enc = self.tokenizer(
                chunk,
                truncation=True,
                padding=True,
                max_length=self.max_len,
                return_tensors="pt"
            ).to(self.device)
            logits = self.model(**enc).logits
            out.append(F.softmax(logits, dim=-1).cpu().numpy())
            del enc, logits
        return np.vstack(out)


PREDICTORS: Dict[str, Type] = {
    "textblob": TextBlobPredictor,
    "vader": VaderPredictor,
    "logistic": LogisticPredictor,
    "svm": SVMPredictor,
    "fasttext": FastTextPredictor,
    "transformer": TransformerPredictor,
}


_predictors: Dict = {}
_predictors_lock = threading.Lock()


def get_predictor(method: str, path: Optional[str] = None):
    """Build the predictor for a method once per process and reuse it."""
    try:
        cls = PREDICTORS[method]
    except KeyError:
        raise ValueError(f"Unknown method '{method}'") from None

    key = (method, path)
    # Flask and Dash serve requests on threads; only one of them builds a model
    with _predictors_lock:
        if key not in _predictors:
            logger.info("Loading %s predictor (path=%s)", method, path)
            _predictors[key] = cls(path)
        return _predictors[key]


def clear_predictors() -> None:
    with _predictors_lock:
        _predictors.clear()


def predict_text(method: str, path: Optional[str], text: str, lowercase: bool = False) -> np.ndarray:
    """Probabilities (shape (5,)) for a single text."""
    if lowercase:
        text = text.lower()
    return get_predictor(method, path).predict([text])[0]


# ---------- LIME per-example explanation ----------

def explainer(method: str, path_to_file: Optional[str], text: str, lowercase: bool = False, num_samples: int = 1000,
              random_state: Optional[int] = None):
    """
    Build and return a LIME explanation for a single text, restricted to the
    top predicted class. num_samples controls how many perturbed copies of the
    text LIME sends to the classifier.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Text to explain must not be blank.")
    if isinstance(num_samples, bool) or not float(num_samples).is_integer() or float(num_samples) < 1:
        raise ValueError("num_samples must be a positive integer.")
    num_samples = int(num_samples)

    predictor = get_predictor(method, path_to_file)
    if lowercase:
        text = text.lower()

    lime = LimeTextExplainer(
        class_names=[str(c) for c in CLASS_NAMES],
        # Whitespace tokens with word positions kept, so "not good" and "good" differ
        split_expression=lambda x: x.split(),
        bow=False,
        random_state=random_state,
    )
    exp = lime.explain_instance(
        text,
        classifier_fn=predictor.predict,
        top_labels=1,
        num_features=NUM_FEATURES,
        num_samples=num_samples,
    )
    logger.debug("Explained %d chars with %s using %d samples", len(text), method, num_samples)
    return exp


def explanation_html(exp) -> str:
    """Self-contained HTML page (scripts inlined) for iframe embedding."""
    return exp.as_html()


def top_label(exp) -> int:
    """Sentiment class (1..5) LIME explained."""
    return CLASS_NAMES[exp.available_labels()[0]]


def explanation_figure(exp):
    """Matplotlib bar chart of the word weights for the explained class."""
    fig = exp.as_pyplot_figure(label=exp.available_labels()[0])
    plt.tight_layout()
    return fig
