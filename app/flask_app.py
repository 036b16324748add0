# app/flask_app.py
# Flask front end: a form page and a result page embedding the LIME explanation in an iframe.
#
# Run:
#   python app/flask_app.py
#   gunicorn "app.flask_app:create_app()"

import os
import sys

# Ensure we can import from project root when running "python app/flask_app.py"
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import logging

from flask import Flask, jsonify, render_template, request

from utils import config
from utils import explain
from utils.forms import InvalidSubmission, parse_submission

logger = logging.getLogger(__name__)


def _form_context(**extra):
    ctx = {
        "methods": config.methods().values(),
        "text": "",
        "num_samples": config.DEFAULT_NUM_SAMPLES,
        "method": config.DEFAULT_METHOD,
        "max_samples": config.MAX_NUM_SAMPLES,
        "error": None,
    }
    ctx.update(extra)
    return ctx


def create_app():
    app = Flask(__name__)

    @app.route("/")
    def index():
        return render_template("index.html", **_form_context())

    @app.route("/result", methods=["POST"])
    def result():
        text = request.form.get("entry", "")
        num_samples = request.form.get("n_samples", "")
        method = request.form.get("classifier", "")

        try:
            sub = parse_submission(text, num_samples, method)
        except InvalidSubmission as e:
            ctx = _form_context(text=text, num_samples=num_samples, method=method, error=str(e))
            return render_template("index.html", **ctx), 400

        cfg = sub.method_config
        try:
            exp = explain.explainer(cfg.key, cfg.path, sub.text, cfg.lowercase, sub.num_samples)
        except Exception:
            logger.exception("Explanation failed for method=%s", cfg.key)
            ctx = _form_context(text=text, num_samples=num_samples, method=method,
                                error=f"Could not run the {cfg.name} classifier. Check the server logs.")
            return render_template("index.html", **ctx), 500

        logger.info("Explained %d chars with %s (%d samples)", len(sub.text), cfg.key, sub.num_samples)
        return render_template(
            "result.html",
            text=sub.text,
            method_name=cfg.name,
            num_samples=sub.num_samples,
            label=explain.top_label(exp),
            exp_html=explain.explanation_html(exp),
        )

    @app.route("/health")
    def health():
        return jsonify(status="ok", methods=config.method_keys())

    return app


if __name__ == "__main__":
    config.setup_logging()
    create_app().run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
