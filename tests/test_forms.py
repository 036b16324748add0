"""
Tests for dashboard form validation
"""
import pytest

from utils.forms import InvalidSubmission, Submission, parse_submission


class TestValidSubmission:

    def test_strips_text_and_parses_count(self):
        sub = parse_submission("  a fine film \n", "250", "logistic")
        assert sub == Submission(text="a fine film", num_samples=250, method="logistic")

    def test_accepts_numeric_widget_values(self):
        # Dash/Streamlit number inputs hand over ints or floats
        assert parse_submission("ok", 100, "vader").num_samples == 100
        assert parse_submission("ok", 100.0, "vader").num_samples == 100

    def test_method_config_resolves(self):
        sub = parse_submission("ok", 10, "svm")
        assert sub.method_config.name == "Support Vector Machine"


class TestRejectedSubmission:

    @pytest.mark.parametrize("text", [None, "", "   \n\t"])
    def test_blank_text(self, text):
        with pytest.raises(InvalidSubmission, match="text"):
            parse_submission(text, 100, "textblob")

    @pytest.mark.parametrize("n", [None, "", "  "])
    def test_blank_sample_count(self, n):
        with pytest.raises(InvalidSubmission, match="number of samples"):
            parse_submission("fine", n, "textblob")

    @pytest.mark.parametrize("n", ["abc", "2.5", 2.5, True])
    def test_non_integer_sample_count(self, n):
        with pytest.raises(InvalidSubmission, match="whole number"):
            parse_submission("fine", n, "textblob")

    @pytest.mark.parametrize("n", [0, -5, "100000"])
    def test_sample_count_out_of_range(self, n):
        with pytest.raises(InvalidSubmission, match="between 1 and"):
            parse_submission("fine", n, "textblob", max_samples=5000)

    def test_unknown_method(self):
        with pytest.raises(InvalidSubmission, match="Unknown classifier"):
            parse_submission("fine", 100, "bert-large")

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_submission("", 100, "textblob")
