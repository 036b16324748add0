"""
LIME explanation for one text from the command line, without a dashboard.

Usage:
  python explain_cli.py --method logistic --text "It's not a bad film at all."
  python explain_cli.py --method textblob --text "A gorgeous, witty, seductive movie." --num_samples 500 --out_png docs/lime_textblob.png

Outputs:
  - Prints predicted class and probabilities
  - Saves the standalone HTML explanation (default: docs/lime_<method>.html)
  - Optionally saves the word-weight bar chart as PNG
"""

import argparse
import os

import numpy as np
import matplotlib
matplotlib.use("Agg")  # ensure we can save figures headlessly
import matplotlib.pyplot as plt

from utils import config
from utils.explain import explainer, explanation_figure, predict_text


def ensure_dir(p: str) -> None:
    if p:
        os.makedirs(p, exist_ok=True)


def main(method: str, text: str, num_samples: int, out_html: str, out_png: str = None, path: str = None):
    cfg = config.get_method(method)
    path = path or cfg.path

    probs = predict_text(cfg.key, path, text, lowercase=cfg.lowercase)
    pred_idx = int(np.argmax(probs))

    print("\nText:")
    print(text)
    print(f"\nMethod: {cfg.name}")
    print("Predicted:", config.CLASS_NAMES[pred_idx])
    print("Probabilities (1..5):", np.round(probs, 4).tolist())

    exp = explainer(cfg.key, path, text, lowercase=cfg.lowercase, num_samples=num_samples)

    ensure_dir(os.path.dirname(out_html))
    exp.save_to_file(out_html)
    print(f"\n[saved] {out_html}")

    if out_png:
        fig = explanation_figure(exp)
        ensure_dir(os.path.dirname(out_png))
        fig.savefig(out_png, dpi=150)
        plt.close(fig)
        print(f"[saved] {out_png}")

    return exp


if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--method", default=config.DEFAULT_METHOD, choices=config.method_keys())
    ap.add_argument("--text", required=True, help="Text to explain")
    ap.add_argument("--num_samples", type=int, default=config.DEFAULT_NUM_SAMPLES, help="LIME perturbation samples")
    ap.add_argument("--path", default=None, help="Override the model/training file for the method")
    ap.add_argument("--out_html", default=None, help="HTML output (default: docs/lime_<method>.html)")
    ap.add_argument("--out_png", default=None, help="Optional PNG bar chart output")
    args = ap.parse_args()
    config.setup_logging()
    out_html = args.out_html or os.path.join("docs", f"lime_{args.method}.html")
    main(args.method, args.text, args.num_samples, out_html, args.out_png, args.path)
