# app/dash_app.py
# Plotly Dash front end: one page, one callback that fills an iframe with the LIME explanation.
#
# Run:
#   python app/dash_app.py
#   gunicorn "app.dash_app:server"

import os
import sys

# Ensure we can import from project root when running "python app/dash_app.py"
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import logging

from dash import Dash, Input, Output, State, dcc, html, no_update
from dash.exceptions import PreventUpdate

from utils import config
from utils import explain
from utils.forms import InvalidSubmission, parse_submission

logger = logging.getLogger(__name__)

app = Dash(__name__, title="Fine-grained Sentiment Explainer")
server = app.server


# --------------------------- LAYOUT ---------------------------

def method_options():
    return [{"label": m.name, "value": m.key} for m in config.methods().values()]


app.layout = html.Div(
    style={"maxWidth": "1100px", "margin": "2em auto", "fontFamily": "sans-serif"},
    children=[
        html.H1("Fine-grained Sentiment Explainer"),
        html.P("Predict a sentiment class from 1 (very negative) to 5 (very positive) "
               "and see which words drove it, using LIME."),
        html.Label("Text", htmlFor="text-input"),
        dcc.Textarea(id="text-input", style={"width": "100%", "height": 120},
                     placeholder="Enter a sentence to explain"),
        html.Label("Number of LIME samples", htmlFor="samples-input"),
        dcc.Input(id="samples-input", type="number", min=1, max=config.MAX_NUM_SAMPLES, step=1,
                  value=config.DEFAULT_NUM_SAMPLES),
        html.Label("Classifier", htmlFor="method-dropdown"),
        dcc.Dropdown(id="method-dropdown", options=method_options(), value=config.DEFAULT_METHOD,
                     clearable=False),
        html.Button("Explain", id="submit-button", n_clicks=0, style={"marginTop": "1em"}),
        html.Div(id="message", style={"marginTop": "1em", "fontWeight": 600}),
        dcc.Loading(
            html.Iframe(id="explanation-frame", sandbox="allow-scripts",
                        style={"width": "100%", "height": "800px", "border": "none"}),
        ),
    ],
)


# --------------------------- CALLBACKS ---------------------------

@app.callback(
    Output("explanation-frame", "srcDoc"),
    Output("message", "children"),
    Input("submit-button", "n_clicks"),
    State("text-input", "value"),
    State("samples-input", "value"),
    State("method-dropdown", "value"),
)
def update_explanation(n_clicks, text, num_samples, method):
    """Return (iframe srcDoc, message) for a click on the Explain button."""
    if not n_clicks:
        raise PreventUpdate

    try:
        sub = parse_submission(text, num_samples, method)
    except InvalidSubmission as e:
        return no_update, str(e)

    cfg = sub.method_config
    try:
        exp = explain.explainer(cfg.key, cfg.path, sub.text, cfg.lowercase, sub.num_samples)
    except Exception:
        logger.exception("Explanation failed for method=%s", cfg.key)
        return no_update, f"Could not run the {cfg.name} classifier. Check the server logs."

    logger.info("Explained %d chars with %s (%d samples)", len(sub.text), cfg.key, sub.num_samples)
    return explain.explanation_html(exp), f"{cfg.name} predicts class {explain.top_label(exp)}."


if __name__ == "__main__":
    config.setup_logging()
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
