"""Tests for Yes/No answering and toggle state.

@file test_toggles.py
@description Button-pair toggles with and without a selected-state reader,
             the per-run answered-block set, and the radio fallback.
"""

from ats_autofill.interaction.toggles import answer_yes_no
from ats_autofill.perception.toggle_state import ComputedStyleToggleState
from ats_autofill.state import outcome as result
from ats_autofill.state.outcome import FillStatus
from fakes import FakePage, el

SELECTED = "rgb(0, 0, 0)"
UNSELECTED = "rgb(255, 255, 255)"


def _toggle_page(selected=None, paints=True):
    """Question with a Yes/No button pair; clicking paints the chosen button"""
    yes = el("button", "Yes")
    no = el("button", "No")
    for button in (yes, no):
        button.styles["background"] = UNSELECTED
    if selected is not None:
        {"Yes": yes, "No": no}[selected].styles["background"] = SELECTED

    def paint(node, page, _):
        if paints:
            for button in (yes, no):
                button.styles["background"] = SELECTED if button is node else UNSELECTED

    yes.on("click", paint)
    no.on("click", paint)
    page = FakePage(
        el(
            "div",
            "",
            el("div", "", el("p", "Are you authorized to work in the United States?")),
            el("div", "", yes, no),
            cls="question",
        )
    )
    return page, yes, no


class TestComputedStyleToggleState:
    def test_interpret(self):
        reader = ComputedStyleToggleState()
        assert reader.interpret({"background": "rgb(0,0,0)"}).selected
        assert reader.interpret({"classes": "btn selected"}).selected
        assert reader.interpret({"ariaPressed": "true"}).selected
        assert not reader.interpret({"background": UNSELECTED}).selected
        assert not reader.interpret(None).selected

    def test_read_gone_button(self, run):
        page = FakePage()
        state = run(ComputedStyleToggleState().read(page.locator("button")))
        assert state.selected is False
        assert state.background == "unknown"


class TestAnswerYesNo:
    QUESTION = "Are you authorized to work"

    def test_click_without_reader(self, run, make_ctx):
        page, yes, _ = _toggle_page()
        outcome = run(answer_yes_no(make_ctx(page), self.QUESTION, "yes"))
        assert outcome.status == FillStatus.FILLED
        assert outcome.detail == "Yes"
        assert page.clicks() == [yes]

    def test_answer_is_normalized(self, run, make_ctx):
        page, _, no = _toggle_page()
        run(answer_yes_no(make_ctx(page), self.QUESTION, "nope", field="authorized_to_work"))
        assert page.clicks() == [no]

    def test_click_is_verified(self, run, make_ctx):
        page, yes, _ = _toggle_page()
        ctx = make_ctx(page, toggle_state=ComputedStyleToggleState())
        outcome = run(answer_yes_no(ctx, self.QUESTION, "Yes"))
        assert outcome.status == FillStatus.FILLED
        assert yes.styles["background"] == SELECTED

    def test_already_selected_is_not_clicked(self, run, make_ctx):
        page, _, _ = _toggle_page(selected="Yes")
        ctx = make_ctx(page, toggle_state=ComputedStyleToggleState())
        outcome = run(answer_yes_no(ctx, self.QUESTION, "Yes"))
        assert outcome.status == FillStatus.ALREADY_SET
        assert page.clicks() == []

    def test_other_answer_selected_is_switched(self, run, make_ctx):
        page, _, no = _toggle_page(selected="Yes")
        ctx = make_ctx(page, toggle_state=ComputedStyleToggleState())
        outcome = run(answer_yes_no(ctx, self.QUESTION, "No"))
        assert outcome.status == FillStatus.FILLED
        assert page.clicks() == [no]

    def test_click_that_does_not_stick(self, run, make_ctx):
        page, _, _ = _toggle_page(paints=False)
        ctx = make_ctx(page, toggle_state=ComputedStyleToggleState())
        outcome = run(answer_yes_no(ctx, self.QUESTION, "Yes"))
        assert outcome.status == FillStatus.VERIFICATION_MISMATCH
        assert not outcome.ok

    def test_block_answered_once_per_run(self, run, make_ctx):
        page, _, _ = _toggle_page()
        ctx = make_ctx(page)
        run(answer_yes_no(ctx, self.QUESTION, "Yes"))
        outcome = run(answer_yes_no(ctx, "authorized to work", "No"))
        assert outcome.status == FillStatus.ALREADY_SET
        assert outcome.detail == "answered earlier in this run"
        assert len(page.clicks()) == 1

    def test_answered_set_not_shared_between_runs(self, run, make_ctx):
        page, _, _ = _toggle_page()
        run(answer_yes_no(make_ctx(page), self.QUESTION, "Yes"))
        outcome = run(answer_yes_no(make_ctx(page), self.QUESTION, "Yes"))
        assert outcome.status == FillStatus.FILLED
        assert len(page.clicks()) == 2

    def test_radio_fallback(self, run, make_ctx):
        page = FakePage(
            el(
                "div",
                "",
                el("p", "Are you authorized to work?"),
                el("label", "", el("input", type_="radio"), el("span", "Yes")),
                el("label", "", el("input", type_="radio"), el("span", "No")),
            )
        )
        outcome = run(answer_yes_no(make_ctx(page), self.QUESTION, "No"))
        assert outcome.status == FillStatus.FILLED
        assert page.clicks()[0].full_text() == "No"

    def test_adapter_fallback_when_nothing_found(self, run, make_ctx):
        page = FakePage(el("p", "Unrelated"))
        ctx = make_ctx(page)
        calls = []

        async def fallback():
            calls.append(True)
            return ctx.record(result.filled("authorized_to_work", "dropdown"))

        outcome = run(answer_yes_no(ctx, self.QUESTION, "Yes", fallback=fallback))
        assert calls == [True]
        assert outcome.detail == "dropdown"
