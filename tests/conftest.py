"""Shared fixtures for AI Form Assist tests."""

import pytest

from tests.pages import build_page


@pytest.fixture
def make_page():
    """Factory fixture for static pages."""
    return build_page


@pytest.fixture
def signup_page():
    """A small signup form covering every target type."""
    return build_page(
        """
        <form>
          <input type="text" id="email" name="email">
          <textarea id="bio"></textarea>
          <input type="checkbox" id="terms">
          <input type="radio" name="plan" id="plan-basic" value="basic">
          <input type="radio" name="plan" id="plan-pro" value="pro">
          <select id="country">
            <option value="us">United States</option>
            <option value="uk">United Kingdom</option>
          </select>
          <input type="text" id="payload">
        </form>
        """,
        head="<title>Sign up</title>",
    )
