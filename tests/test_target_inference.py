"""Tests for target inference."""

import asyncio

import pytest
from hypothesis import given, settings, strategies as st

from ai_form_assist.core.models import TargetDescriptor, TargetType
from ai_form_assist.engine.inference import TargetInferrer, build_selector, infer_type
from ai_form_assist.page.adapter import ElementInfo
from tests.pages import build_page

MIXED_FORM = """
<form>
  <input type="text" id="first" name="first_name">
  <input type="email" name="email">
  <input type="hidden" name="token" value="x">
  <textarea></textarea>
  <select id="country"><option value="us">United States</option></select>
  <input type="checkbox" id="agree">
  <input type="radio" name="plan" id="plan-basic" value="basic">
  <input type="radio" name="plan" id="plan-pro" value="pro">
  <input type="submit" value="Send">
</form>
"""


class TestTargetInferrer:
    """Test cases for TargetInferrer."""
    
    @pytest.mark.asyncio
    async def test_infers_whitelisted_controls_in_document_order(self, make_page):
        """Test names, selectors and types for a mixed form."""
        targets = await TargetInferrer(make_page(MIXED_FORM)).infer_targets()
        
        assert targets == [
            TargetDescriptor(name="first_name", selector="#first", type=TargetType.TEXT),
            TargetDescriptor(name="email", selector='[name="email"]', type=TargetType.TEXT),
            TargetDescriptor(name="field-2", selector="textarea:nth-of-type(3)", type=TargetType.TEXT),
            TargetDescriptor(name="country", selector="#country", type=TargetType.SELECT),
            TargetDescriptor(name="agree", selector="#agree", type=TargetType.CHECKBOX),
            TargetDescriptor(name="plan", selector="#plan-basic", type=TargetType.RADIO),
            TargetDescriptor(name="plan", selector="#plan-pro", type=TargetType.RADIO),
        ]
    
    @pytest.mark.asyncio
    async def test_empty_page_yields_no_targets(self, make_page):
        """Test that a page without controls is valid."""
        targets = await TargetInferrer(make_page("<p>Nothing to fill</p>")).infer_targets()
        assert targets == []
    
    @pytest.mark.asyncio
    async def test_duplicate_names_are_collapsed(self, make_page):
        """Test that repeated non-radio names keep the first control."""
        page = make_page('<input type="tel" name="phone"><input type="tel" name="phone">')
        
        targets = await TargetInferrer(page).infer_targets()
        
        assert [t.name for t in targets] == ["phone"]
    
    @pytest.mark.asyncio
    async def test_inference_is_deterministic(self, make_page):
        """Test that two scans of an unchanged page agree."""
        inferrer = TargetInferrer(make_page(MIXED_FORM))
        
        first = await inferrer.infer_targets()
        second = await inferrer.infer_targets()
        
        assert first == second


@given(
    kinds=st.lists(
        st.sampled_from(["text", "email", "number", "checkbox", "radio", "textarea", "select"]),
        max_size=12,
    ),
    with_ids=st.lists(st.booleans(), min_size=12, max_size=12),
)
@settings(max_examples=40, deadline=None)
def test_inference_determinism_property(kinds, with_ids):
    """Property: repeated inference over a fixed DOM gives identical lists."""
    parts = []
    for index, kind in enumerate(kinds):
        id_attr = f' id="f{index}"' if with_ids[index] else ""
        if kind == "textarea":
            parts.append(f"<textarea{id_attr}></textarea>")
        elif kind == "select":
            parts.append(f"<select{id_attr}><option>a</option></select>")
        else:
            parts.append(f'<input type="{kind}"{id_attr}>')
    page = build_page("".join(parts))
    
    async def run_test():
        inferrer = TargetInferrer(page)
        return await inferrer.infer_targets(), await inferrer.infer_targets()
    
    first, second = asyncio.run(run_test())
    
    assert first == second
    assert len(first) == len(kinds)


class TestSelectorHelpers:
    """Test cases for selector and type derivation."""
    
    def test_id_selector_preferred(self):
        assert build_selector(ElementInfo(tag="input", id="email", name="mail"), 0) == "#email"
    
    def test_unusual_id_uses_attribute_selector(self):
        assert build_selector(ElementInfo(tag="input", id="user.email"), 0) == '[id="user.email"]'
    
    def test_name_selector_escapes_quotes(self):
        assert build_selector(ElementInfo(tag="input", name='a"b'), 0) == '[name="a\\"b"]'
    
    def test_positional_selector(self):
        assert build_selector(ElementInfo(tag="select"), 4) == "select:nth-of-type(5)"
    
    def test_infer_type(self):
        assert infer_type(ElementInfo(tag="input", type="checkbox")) is TargetType.CHECKBOX
        assert infer_type(ElementInfo(tag="input", type="radio")) is TargetType.RADIO
        assert infer_type(ElementInfo(tag="select", type="select")) is TargetType.SELECT
        assert infer_type(ElementInfo(tag="textarea", type="textarea")) is TargetType.TEXT
        assert infer_type(ElementInfo(tag="input", type="email")) is TargetType.TEXT
