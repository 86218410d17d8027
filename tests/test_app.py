"""
Tests for the Streamlit frontend.

Runs app/main.py headless with Streamlit's AppTest against a baseline
file in a temporary directory. Insights stay disabled (no Gemini key).
"""

import pytest
from streamlit.testing.v1 import AppTest


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("STORE_BASELINE_PATH", str(tmp_path / "initial_data.json"))
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("CURRENCY_CODE", "inr")
    at = AppTest.from_file("../app/main.py", default_timeout=30)
    at.run()
    return at


class TestDashboard:
    """Tests for the dashboard page."""

    def test_renders_without_errors(self, app):
        """Test metrics, charts and tables render for the baseline."""
        assert not app.exception
        assert [metric.label for metric in app.metric] == [
            "Net Worth",
            "Total Assets",
            "Total Liabilities",
        ]

    def test_amounts_carry_currency(self, app):
        """Test headline figures are shown with the currency code."""
        assert all(metric.value.startswith("INR ") for metric in app.metric)


class TestEditPage:
    """Tests for the data editing page."""

    def test_non_numeric_value_shows_warning(self, app):
        """Test a rejected value leaves a visible warning."""
        app.sidebar.radio[0].set_value("✏️ Edit Data").run()
        app.text_input[0].set_value("abc")
        app.button[0].click().run()

        assert not app.exception
        assert [w.value for w in app.warning] == [
            "That is not a number; nothing was changed."
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
