"""
Text normaliser for the feature-based (TF-IDF) sentiment pipelines.

SST-5 sentences come pre-tokenised (e.g. "it 's", "does n't", "-LRB-"), while
text typed into the dashboards does not. Both go through the same cleaner so
the vectoriser sees one vocabulary:
- undo Penn Treebank bracket tokens and split contractions
- fix HTML entities / strip tags
- remove URLs and @user handles
- lowercase (optional), strip punctuation but keep apostrophes
- collapse whitespace

Usages:
    from utils.text_clean import clean_text, TextCleaner
    clean_text("It doesn't work -LRB- at all -RRB- !")   # "it does n't work at all"

    pipe = Pipeline([
        ("clean", TextCleaner()),
        ("tfidf", TfidfVectorizer(ngram_range=(1, 2))),
        ("clf", LogisticRegression(max_iter=300)),
    ])
"""

from __future__ import annotations
import html
import re
import string
from typing import List, Optional

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

# --- Regexes ---
RE_URL = re.compile(r"(https?://\S+|www\.\S+)", re.IGNORECASE)
RE_USER = re.compile(r"@\w+")
RE_HTML_TAG = re.compile(r"<[^>]+>")
RE_CONTRACTION = re.compile(r"(\w)(n't|'s|'re|'ve|'ll|'d|'m)\b", re.IGNORECASE)

PTB_TOKENS = {
    "-LRB-": " ",
    "-RRB-": " ",
    "-LSB-": " ",
    "-RSB-": " ",
    "-LCB-": " ",
    "-RCB-": " ",
    "``": " ",
    "''": " ",
}

# Apostrophes carry the negation in "n't", so they survive punctuation removal
_PUNCT = string.punctuation.replace("'", "")
_PUNCT_TABLE = str.maketrans({ch: " " for ch in _PUNCT})


def clean_text(
    text: Optional[str],
    *,
    lower: bool = True,
    fix_html: bool = True,
    split_contractions: bool = True,
    remove_urls: bool = True,
    remove_usernames: bool = True,
    remove_punct: bool = True,
) -> str:
    """Returns empty string for non-str inputs."""
    if not isinstance(text, str):
        return ""

    s = text.strip()
    for token, repl in PTB_TOKENS.items():
        s = s.replace(token, repl)

    if fix_html:
        s = html.unescape(s)
        s = RE_HTML_TAG.sub(" ", s)
    if remove_urls:
        s = RE_URL.sub(" ", s)
    if remove_usernames:
        s = RE_USER.sub(" ", s)

    s = s.replace("’", "'")
    if split_contractions:
        s = RE_CONTRACTION.sub(r"\1 \2", s)
    if lower:
        s = s.lower()
    if remove_punct:
        s = s.translate(_PUNCT_TABLE)

    return " ".join(s.split())


class TextCleaner(BaseEstimator, TransformerMixin):
    """
    Sklearn-compatible cleaner. Applies clean_text() element-wise.
    """
    def __init__(self, lower: bool = True, split_contractions: bool = True, remove_punct: bool = True):
        self.lower = lower
        self.split_contractions = split_contractions
        self.remove_punct = remove_punct

    def fit(self, X, y=None):
        return self

    def transform(self, X) -> List[str]:
        if isinstance(X, (pd.Series, np.ndarray)):
            iterable = X.tolist()
        else:
            iterable = list(X)
        return [
            clean_text(
                x,
                lower=self.lower,
                split_contractions=self.split_contractions,
                remove_punct=self.remove_punct,
            )
            for x in iterable
        ]
