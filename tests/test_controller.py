"""Tests for click routing, arrow drags and setup mode."""

import chess

from study.constants import PRIMARY_BUTTON, SECONDARY_BUTTON
from study.controller import InteractionController
from study.models import Arrow
from study.session import StudySession


class TestMoves:
    def test_first_click_selects_without_notifying(self, controller: InteractionController) -> None:
        calls = []
        controller.session.on_state_changed(lambda: calls.append(1))
        controller.click("e2")
        assert controller.selected_square == "e2"
        assert calls == []

    def test_second_click_plays_move_and_clears_selection(self, controller: InteractionController) -> None:
        controller.click("e2")
        controller.click("e4")
        assert controller.selected_square is None
        assert controller.session.rules.piece_at("e4") == ("w", "p")

    def test_illegal_move_still_notifies_but_keeps_position(self, controller: InteractionController) -> None:
        calls = []
        controller.session.on_state_changed(lambda: calls.append(1))
        before = controller.session.rules.fen()
        controller.click("e2")
        controller.click("e5")
        assert controller.session.rules.fen() == before
        assert controller.selected_square is None
        assert calls == [1]

    def test_move_from_empty_square_keeps_position(self, controller: InteractionController) -> None:
        before = controller.session.rules.fen()
        controller.click("d4")
        controller.click("d5")
        assert controller.session.rules.fen() == before


class TestHighlights:
    def test_shift_click_toggles_and_keeps_selection(self, controller: InteractionController) -> None:
        controller.click("e2")
        controller.click("d5", modified=True)
        assert controller.session.annotations.highlights == ["d5"]
        assert controller.selected_square == "e2"

    def test_toggling_twice_restores_highlights(self, controller: InteractionController) -> None:
        controller.click("a1", modified=True)
        original = list(controller.session.annotations.highlights)
        controller.click("c3", modified=True)
        controller.click("c3", modified=True)
        assert controller.session.annotations.highlights == original


class TestArrows:
    def test_secondary_drag_adds_arrow(self, controller: InteractionController) -> None:
        controller.press("g1", SECONDARY_BUTTON)
        controller.release("f3", SECONDARY_BUTTON)
        assert controller.session.annotations.arrows == [Arrow(from_square="g1", to_square="f3")]
        assert controller.arrow_start is None

    def test_duplicate_arrows_are_kept(self, controller: InteractionController) -> None:
        for _ in range(2):
            controller.press("g1", SECONDARY_BUTTON)
            controller.release("f3", SECONDARY_BUTTON)
        assert len(controller.session.annotations.arrows) == 2

    def test_release_without_press_is_ignored(self, controller: InteractionController) -> None:
        controller.release("f3", SECONDARY_BUTTON)
        assert controller.session.annotations.arrows == []

    def test_primary_button_never_draws(self, controller: InteractionController) -> None:
        controller.press("g1", PRIMARY_BUTTON)
        controller.release("f3", PRIMARY_BUTTON)
        assert controller.arrow_start is None
        assert controller.session.annotations.arrows == []

    def test_drag_does_not_touch_selection(self, controller: InteractionController) -> None:
        controller.click("e2")
        controller.press("g1", SECONDARY_BUTTON)
        controller.release("f3", SECONDARY_BUTTON)
        controller.click("e4")
        assert controller.session.rules.piece_at("e4") == ("w", "p")


class TestSetupMode:
    def test_click_removes_piece(self, controller: InteractionController) -> None:
        assert controller.toggle_setup()
        controller.click("d1")
        assert controller.session.rules.piece_at("d1") is None

    def test_modifier_is_ignored_in_setup_mode(self, controller: InteractionController) -> None:
        controller.toggle_setup()
        controller.click("d8", modified=True)
        assert controller.session.rules.piece_at("d8") is None
        assert controller.session.annotations.highlights == []

    def test_empty_square_is_noop(self, controller: InteractionController) -> None:
        controller.toggle_setup()
        before = controller.session.rules.fen()
        controller.click("e4")
        assert controller.session.rules.fen() == before
        assert controller.selected_square is None

    def test_toggle_back_restores_moves(self, controller: InteractionController) -> None:
        controller.toggle_setup()
        assert not controller.toggle_setup()
        controller.click("e2")
        controller.click("e4")
        assert controller.session.rules.piece_at("e4") == ("w", "p")


class TestTools:
    def test_clear_and_reset(self, controller: InteractionController) -> None:
        controller.clear_board()
        assert controller.session.rules.piece_at("e1") is None
        controller.reset_board()
        assert controller.session.rules.fen() == chess.STARTING_FEN

    def test_board_changes_are_persisted(self, controller: InteractionController) -> None:
        controller.click("e2")
        controller.click("e4")
        stored = controller.session.persistence.load_state()
        assert stored is not None
        assert stored.fen == controller.session.rules.fen()


class TestStudyScenario:
    def test_openings_course(self, session: StudySession, controller: InteractionController) -> None:
        session.create_course("Openings")
        session.add_chapter("Italian")
        for origin, target in (("e2", "e4"), ("e7", "e5")):
            controller.click(origin)
            controller.click(target)
        session.save_position("King's pawn")

        expected = chess.Board()
        expected.push_uci("e2e4")
        expected.push_uci("e7e5")

        courses = session.tree.courses
        assert list(courses) == ["Openings"]
        (chapter,) = courses["Openings"].chapters
        assert chapter.title == "Italian"
        (position,) = chapter.positions
        assert position.fen == expected.fen()
        assert position.explanation == "King's pawn"
