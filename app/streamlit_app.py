# app/streamlit_app.py
# Streamlit UI for fine-grained (1-5) sentiment with LIME explanations embedded as HTML.

import os
import sys

# Ensure we can import from project root when running "streamlit run app/streamlit_app.py"
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import logging

import numpy as np
import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from utils import config
from utils import explain
from utils.forms import InvalidSubmission, parse_submission

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Fine-grained Sentiment Explainer", page_icon="💬", layout="wide")
METHODS = config.methods()


# --------------------------- CACHED LOADERS ---------------------------

@st.cache_resource
def load_predictor(method: str, path):
    return explain.get_predictor(method, path)


# --------------------------- SMALL UI HELPERS ---------------------------

def confidence_gauge(prob, label: int):
    """Show a simple confidence meter for the predicted class."""
    val = float(prob)
    if np.isnan(val):
        val = 0.0
    val = max(0.0, min(1.0, val))

    st.write(f"**Confidence in class `{label}`:** {val:.2%}")
    st.progress(val)


def probability_chart(probs):
    df = pd.DataFrame({"probability": np.asarray(probs, dtype=float)}, index=[str(c) for c in config.CLASS_NAMES])
    df.index.name = "class"
    st.bar_chart(df)


# --------------------------- SIDEBAR ---------------------------

with st.sidebar:
    st.header("Classifier")
    keys = list(METHODS)
    method = st.selectbox(
        "Choose a method",
        options=keys,
        index=keys.index(config.DEFAULT_METHOD) if config.DEFAULT_METHOD in keys else 0,
        format_func=lambda k: METHODS[k].name,
    )
    num_samples = st.number_input(
        "LIME: perturbation samples",
        min_value=1,
        max_value=config.MAX_NUM_SAMPLES,
        value=config.DEFAULT_NUM_SAMPLES,
        step=100,
    )

st.title("💬 Fine-grained Sentiment Explainer")
st.caption("Sentiment classes from 1 (very negative) to 5 (very positive), explained with LIME")

text = st.text_area("Enter text:", height=140, value="")

if st.button("Explain"):
    try:
        sub = parse_submission(text, num_samples, method)
    except InvalidSubmission as e:
        st.warning(str(e))
        st.stop()

    cfg = sub.method_config
    try:
        with st.spinner(f"Loading {cfg.name}…"):
            load_predictor(cfg.key, cfg.path)
        probs = explain.predict_text(cfg.key, cfg.path, sub.text, cfg.lowercase)
        with st.spinner(f"Generating explanation with {sub.num_samples} samples…"):
            exp = explain.explainer(cfg.key, cfg.path, sub.text, cfg.lowercase, sub.num_samples)
    except Exception:
        logger.exception("Explanation failed for method=%s", cfg.key)
        st.error(f"Could not run the {cfg.name} classifier. Check the server logs.")
        st.stop()

    pred_idx = int(np.argmax(probs))
    cols = st.columns([1, 2], gap="large")
    with cols[0]:
        st.write(f"**Prediction:** {config.CLASS_NAMES[pred_idx]}  |  **Probabilities:** {np.round(probs, 3)}")
        confidence_gauge(probs[pred_idx], config.CLASS_NAMES[pred_idx])
        probability_chart(probs)
    with cols[1]:
        components.html(explain.explanation_html(exp), height=800, scrolling=True)
