"""Tests for the word game engine — joining, turns, and game end."""

import logging
import random

import pytest

from wordrack.core.moves import Move, TilePlacement
from wordrack.game.engine import (
    BLANK_NEEDS_LETTER,
    CANNOT_EXCHANGE,
    DUPLICATE_TILE,
    MISSING_TILES,
    NOT_ACTIVE,
    NOT_YOUR_TURN,
    TILE_MISMATCH,
    apply_move,
    new_game,
)
from wordrack.game.placement import MUST_CONNECT, MUST_USE_CENTER, NOT_STRAIGHT
from wordrack.game.serialize import state_to_dict
from wordrack.game.state import GameSettings, GameStatus, MoveType

PASS = {"action": "pass"}


def _assert_tiles_conserved(game):
    state = game.get_state()
    assert state.tile_count() == 100
    ids = state.all_tile_ids()
    assert len(ids) == 100
    assert len(set(ids)) == 100


# ------------------------------------------------------------------
# Joining and starting
# ------------------------------------------------------------------

class TestJoining:
    def test_two_players_start_game(self, game):
        state = game.get_state()
        assert state.status is GameStatus.ACTIVE
        assert [p.id for p in state.players] == ["p1", "p2"]
        assert state.current_player.id == "p1"

    def test_join_draws_rack_and_pays_entry(self, game):
        state = game.get_state()
        assert all(len(p.rack) == 7 for p in state.players)
        assert all(p.balance == 90 for p in state.players)
        assert state.settings.prize_pool == 20
        assert len(state.bag) == 86
        _assert_tiles_conserved(game)

    def test_one_player_waits(self, settings, lexicon, clock):
        g = new_game(settings, lexicon=lexicon, clock=clock)
        assert g.add_player("p1", "Ann", 100)
        assert g.status is GameStatus.WAITING

    def test_single_player_starts_alone(self, lexicon, clock):
        g = new_game(GameSettings(is_single_player=True), lexicon=lexicon, clock=clock)
        assert g.add_player("p1", "Ann", 0)
        assert g.status is GameStatus.ACTIVE

    def test_full_game_refuses(self, lexicon, clock):
        g = new_game(GameSettings(max_players=2), lexicon=lexicon, clock=clock)
        assert g.add_player("p1", "Ann", 0)
        assert g.add_player("p2", "Bo", 0)
        assert g.add_player("p3", "Cy", 0) is False
        assert len(g.get_state().players) == 2

    def test_insufficient_balance_refuses(self, game):
        assert game.add_player("p3", "Cy", 5) is False
        state = game.get_state()
        assert len(state.players) == 2
        assert state.settings.prize_pool == 20
        assert len(state.bag) == 86

    def test_duplicate_id_refuses(self, game):
        assert game.add_player("p1", "Ann again", 100) is False

    def test_join_while_active_appends_to_turn_order(self, game):
        assert game.add_player("p3", "Cy", 10)
        state = game.get_state()
        assert state.players[-1].id == "p3"
        assert state.players[-1].balance == 0
        assert state.settings.prize_pool == 30

    def test_join_refused_when_bag_cannot_deal_rack(self, lexicon, clock):
        g = new_game(GameSettings(max_players=16), lexicon=lexicon, clock=clock)
        for i in range(14):
            assert g.add_player(f"p{i}", f"P{i}", 0)
        assert len(g.get_state().bag) == 2
        assert g.add_player("p14", "Late", 0) is False

        state = g.get_state()
        assert len(state.players) == 14
        assert all(len(p.rack) == 7 for p in state.players)
        assert g.submit_move("p0", PASS).success
        assert g.status is GameStatus.ACTIVE
        _assert_tiles_conserved(g)

    def test_force_start(self, settings, lexicon, clock):
        g = new_game(settings, lexicon=lexicon, clock=clock)
        assert g.force_start() is False  # nobody joined
        g.add_player("p1", "Ann", 100)
        assert g.force_start() is True
        assert g.status is GameStatus.ACTIVE
        assert g.force_start() is False


# ------------------------------------------------------------------
# Turn enforcement
# ------------------------------------------------------------------

class TestTurnEnforcement:
    def test_not_your_turn(self, game):
        result = game.submit_move("p2", PASS)
        assert not result.success
        assert result.error == NOT_YOUR_TURN
        assert result.new_state is None

    def test_not_your_turn_even_for_valid_placement(self, game, rig, place_move):
        tiles = rig(game, "p2", "CAT")
        result = game.submit_move("p2", place_move(tiles, 7, 6))
        assert result.error == NOT_YOUR_TURN
        assert game.get_state().board.is_empty

    def test_unknown_player(self, game):
        assert game.submit_move("nobody", PASS).error == NOT_YOUR_TURN

    @pytest.mark.parametrize("descriptor", [
        {"action": "place", "tiles": [
            {"tile_id": f"t{i}", "row": 7, "col": i} for i in range(8)
        ]},
        {"action": "exchange", "tile_ids": ["t1", "t1"]},
        {"action": "shuffle"},
        "not a move",
    ])
    def test_turn_checked_before_descriptor(self, game, descriptor):
        result = game.submit_move("p2", descriptor)
        assert result.error == NOT_YOUR_TURN
        assert game.get_state().moves == []

    def test_malformed_move_in_waiting_game(self, settings, lexicon, clock):
        g = new_game(settings, lexicon=lexicon, clock=clock)
        g.add_player("p1", "Ann", 100)
        assert g.submit_move("p1", {"action": "shuffle"}).error == NOT_ACTIVE

    def test_waiting_game_not_active(self, settings, lexicon, clock):
        g = new_game(settings, lexicon=lexicon, clock=clock)
        g.add_player("p1", "Ann", 100)
        assert g.submit_move("p1", PASS).error == NOT_ACTIVE

    def test_turn_rotates_in_join_order(self, game):
        game.add_player("p3", "Cy", 100)
        order = []
        for _ in range(4):
            current = game.get_current_player().id
            order.append(current)
            assert game.submit_move(current, PASS).success
        assert order == ["p1", "p2", "p3", "p1"]

    def test_single_player_keeps_turn(self, lexicon, clock):
        g = new_game(GameSettings(is_single_player=True), lexicon=lexicon, clock=clock)
        g.add_player("p1", "Ann", 0)
        assert g.submit_move("p1", PASS).success
        assert g.get_current_player().id == "p1"


# ------------------------------------------------------------------
# Placement
# ------------------------------------------------------------------

class TestPlacement:
    def test_first_move_cat_scores_five(self, game, rig, place_move):
        tiles = rig(game, "p1", "CATEEEE")
        result = game.submit_move("p1", place_move(tiles[:3], 7, 6))
        assert result.success
        assert result.score == 5
        assert result.words == ("CAT",)

        state = game.get_state()
        p1 = state.get_player("p1")
        assert p1.score == 5
        assert len(p1.rack) == 7
        assert len(state.board) == 3
        assert len(state.bag) == 83
        assert state.board.get(7, 7).id == tiles[1].id
        assert state.current_player.id == "p2"
        _assert_tiles_conserved(game)

    def test_move_recorded(self, game, rig, place_move, clock):
        tiles = rig(game, "p1", "CAT")
        clock.advance(12)
        game.submit_move("p1", place_move(tiles, 7, 6))
        (record,) = game.get_state().moves
        assert record.action is MoveType.PLACE
        assert record.player_id == "p1"
        assert [t.id for t in record.tiles] == [t.id for t in tiles]
        assert record.positions == ((7, 6), (7, 7), (7, 8))
        assert record.score == 5
        assert record.timestamp == clock.now

    def test_second_move_forms_cross_word(self, game, rig, place_move):
        cat = rig(game, "p1", "CAT")
        assert game.submit_move("p1", place_move(cat, 7, 6)).success

        (t,) = rig(game, "p2", "T")
        result = game.submit_move("p2", place_move([t], 8, 7))
        assert result.success
        assert result.words == ("AT",)
        assert result.score == 2
        assert len(game.get_player("p2").rack) == 7

    def test_bingo_adds_fifty(self, game, rig, place_move):
        tiles = rig(game, "p1", "LETTERS")
        result = game.submit_move("p1", place_move(tiles, 7, 4))
        assert result.success
        assert result.score == 7 + 50
        assert game.get_player("p1").score == 57

    def test_first_move_must_use_center(self, game, rig, place_move):
        tiles = rig(game, "p1", "CAT")
        result = game.submit_move("p1", place_move(tiles, 3, 3))
        assert result.error == MUST_USE_CENTER

    def test_not_straight(self, game, rig):
        c, a = rig(game, "p1", "CA")
        move = {"action": "place", "tiles": [
            {"tile_id": c.id, "row": 7, "col": 7},
            {"tile_id": a.id, "row": 8, "col": 8},
        ]}
        assert game.submit_move("p1", move).error == NOT_STRAIGHT

    def test_later_move_must_connect(self, game, rig, place_move):
        cat = rig(game, "p1", "CAT")
        game.submit_move("p1", place_move(cat, 7, 6))
        at = rig(game, "p2", "AT")
        result = game.submit_move("p2", place_move(at, 0, 0))
        assert result.error == MUST_CONNECT

    def test_tile_not_in_rack(self, game, place_move):
        stranger = game.get_state().bag.tiles[:3]
        result = game.submit_move("p1", place_move(stranger, 7, 6))
        assert result.error == MISSING_TILES

    def test_tile_used_twice(self, game, rig):
        (c,) = rig(game, "p1", "C")
        move = {"action": "place", "tiles": [
            {"tile_id": c.id, "row": 7, "col": 7},
            {"tile_id": c.id, "row": 7, "col": 8},
        ]}
        assert game.submit_move("p1", move).error == DUPLICATE_TILE

    def test_letter_must_match_rack(self, game, rig):
        c, a, t = rig(game, "p1", "CAT")
        move = {"action": "place", "tiles": [
            {"tile_id": c.id, "letter": "Z", "row": 7, "col": 6},
            {"tile_id": a.id, "row": 7, "col": 7},
            {"tile_id": t.id, "row": 7, "col": 8},
        ]}
        result = game.submit_move("p1", move)
        assert result.error.startswith(TILE_MISMATCH)

    def test_blank_takes_declared_letter(self, game, rig):
        blank, a, t = rig(game, "p1", "?AT")
        move = {"action": "place", "tiles": [
            {"tile_id": blank.id, "letter": "c", "row": 7, "col": 6},
            {"tile_id": a.id, "row": 7, "col": 7},
            {"tile_id": t.id, "row": 7, "col": 8},
        ]}
        result = game.submit_move("p1", move)
        assert result.success
        assert result.words == ("CAT",)
        assert result.score == 2
        placed = game.get_state().board.get(7, 6)
        assert placed.id == blank.id
        assert placed.letter == "C"
        assert placed.is_blank

    def test_blank_needs_letter(self, game, rig, place_move):
        tiles = rig(game, "p1", "?AT")
        result = game.submit_move("p1", place_move(tiles, 7, 6))
        assert result.error == BLANK_NEEDS_LETTER

    def test_blank_letter_must_be_a_to_z(self, game, rig):
        blank, a, t = rig(game, "p1", "?AT")
        move = Move.place([
            TilePlacement(blank.id, 7, 6, letter="é"),
            TilePlacement(a.id, 7, 7),
            TilePlacement(t.id, 7, 8),
        ])
        result = game.submit_move("p1", move)
        assert result.error == BLANK_NEEDS_LETTER
        assert game.get_state().board.is_empty


# ------------------------------------------------------------------
# Atomicity
# ------------------------------------------------------------------

class TestAtomicity:
    def test_invalid_word_changes_nothing(self, game, rig, place_move):
        tiles = rig(game, "p1", "CAX")
        before = state_to_dict(game.get_state())
        result = game.submit_move("p1", place_move(tiles, 7, 6))
        assert not result.success
        assert result.error == "Invalid word: CAX"
        assert state_to_dict(game.get_state()) == before

    def test_rejected_exchange_changes_nothing(self, game, park):
        park(game, keep=2)
        before = state_to_dict(game.get_state())
        rack_ids = [t.id for t in game.get_player("p1").rack]
        game.submit_move("p1", {"action": "exchange", "tile_ids": rack_ids[:3]})
        assert state_to_dict(game.get_state()) == before

    def test_malformed_descriptor(self, game):
        result = game.submit_move("p1", {"action": "jump"})
        assert not result.success
        assert result.error.startswith("Malformed move")
        assert game.get_state().moves == []

    def test_apply_move_never_mutates_input(self, game):
        state = game.get_state()
        before = state_to_dict(state)
        result = apply_move(
            state, "p1", Move.pass_turn(),
            is_valid_word=lambda w: True, rng=random.Random(0), now=5.0,
        )
        assert result.success
        assert result.new_state is not state
        assert result.new_state.current_player_index == 1
        assert state_to_dict(state) == before


# ------------------------------------------------------------------
# Exchange and pass
# ------------------------------------------------------------------

class TestExchangeAndPass:
    def test_exchange_keeps_counts(self, game):
        rack_ids = [t.id for t in game.get_player("p1").rack]
        result = game.submit_move(
            "p1", {"action": "exchange", "tile_ids": rack_ids[:3]}
        )
        assert result.success
        state = game.get_state()
        assert len(state.get_player("p1").rack) == 7
        assert len(state.bag) == 86
        assert state.moves[-1].action is MoveType.EXCHANGE
        assert [t.id for t in state.moves[-1].tiles] == rack_ids[:3]
        assert state.current_player.id == "p2"
        _assert_tiles_conserved(game)

    def test_exchange_more_than_bag_fails(self, game, park):
        park(game, keep=2)
        rack_before = [t.id for t in game.get_player("p1").rack]
        result = game.submit_move(
            "p1", {"action": "exchange", "tile_ids": rack_before[:3]}
        )
        assert result.error == CANNOT_EXCHANGE
        assert [t.id for t in game.get_player("p1").rack] == rack_before
        _assert_tiles_conserved(game)

    def test_exchange_tiles_not_held(self, game):
        stranger = [t.id for t in game.get_state().bag.tiles[:2]]
        result = game.submit_move("p1", {"action": "exchange", "tile_ids": stranger})
        assert result.error == MISSING_TILES

    def test_pass_changes_only_turn(self, game):
        before = game.get_state()
        assert game.submit_move("p1", PASS).success
        after = game.get_state()
        assert after.current_player.id == "p2"
        assert [t.id for t in after.get_player("p1").rack] == [
            t.id for t in before.get_player("p1").rack
        ]
        assert after.board.is_empty
        assert after.moves[-1].action is MoveType.PASS

    def test_tiles_conserved_through_many_turns(self, game):
        for turn in range(30):
            current = game.get_current_player()
            if turn % 3 == 0:
                move = {"action": "exchange", "tile_ids": [t.id for t in current.rack[:2]]}
            else:
                move = PASS
            assert game.submit_move(current.id, move).success
            _assert_tiles_conserved(game)


# ------------------------------------------------------------------
# Game end and settlement
# ------------------------------------------------------------------

class TestGameEnd:
    def test_rack_and_bag_empty_ends_game(
        self, settings, clock, rig, park, place_move
    ):
        g = new_game(settings, lexicon=lambda w: True, rng=random.Random(5), clock=clock)
        g.add_player("p1", "Ann", 100)
        g.add_player("p2", "Bo", 100)
        tiles = rig(g, "p1", "AT")
        rig(g, "p2", "QZ")
        park(g, keep=0)
        _assert_tiles_conserved(g)

        result = g.submit_move("p1", place_move(tiles, 6, 0))
        assert result.success

        state = g.get_state()
        assert state.status is GameStatus.COMPLETED
        assert state.get_player("p2").score == -20
        assert state.get_player("p1").score == result.score
        assert state.winner == "p1"
        assert state.get_player("p1").balance == 90 + 20
        assert state.get_player("p2").balance == 90
        _assert_tiles_conserved(g)

    def test_completed_game_rejects_moves(self, settings, clock, rig, park, place_move):
        g = new_game(settings, lexicon=lambda w: True, clock=clock)
        g.add_player("p1", "Ann", 100)
        g.add_player("p2", "Bo", 100)
        tiles = rig(g, "p1", "AT")
        park(g, keep=0)
        g.submit_move("p1", place_move(tiles, 6, 0))

        assert g.submit_move("p2", PASS).error == NOT_ACTIVE
        assert g.handle_timeout().error == NOT_ACTIVE
        assert g.add_player("p3", "Cy", 100) is False
        assert g.get_player("p1").balance == 110

    def test_game_continues_while_bag_has_tiles(self, game, rig, place_move):
        tiles = rig(game, "p1", "LETTERS")
        game.submit_move("p1", place_move(tiles, 7, 4))
        assert game.status is GameStatus.ACTIVE

    def test_consecutive_passes_end_game(self, lexicon, clock):
        g = new_game(
            GameSettings(max_consecutive_passes=4), lexicon=lexicon, clock=clock
        )
        g.add_player("p1", "Ann", 0)
        g.add_player("p2", "Bo", 0)
        for _ in range(4):
            g.submit_move(g.get_current_player().id, PASS)
        state = g.get_state()
        assert state.status is GameStatus.COMPLETED
        assert all(p.score <= 0 for p in state.players)
        assert state.winner in ("p1", "p2")

    def test_exchange_resets_pass_count(self, lexicon, clock):
        g = new_game(
            GameSettings(max_consecutive_passes=3), lexicon=lexicon, clock=clock
        )
        g.add_player("p1", "Ann", 0)
        g.add_player("p2", "Bo", 0)
        g.submit_move("p1", PASS)
        g.submit_move("p2", PASS)
        rack = [t.id for t in g.get_player("p1").rack]
        g.submit_move("p1", {"action": "exchange", "tile_ids": rack[:1]})
        g.submit_move("p2", PASS)
        assert g.status is GameStatus.ACTIVE


# ------------------------------------------------------------------
# Snapshots and the turn clock
# ------------------------------------------------------------------

class TestAccessors:
    def test_get_state_is_a_copy(self, game):
        snapshot = game.get_state()
        snapshot.players[0].rack.clear()
        snapshot.players[0].score = 999
        fresh = game.get_state()
        assert len(fresh.players[0].rack) == 7
        assert fresh.players[0].score == 0

    def test_result_state_is_a_copy(self, game):
        result = game.submit_move("p1", PASS)
        result.new_state.current_player_index = 0
        assert game.get_current_player().id == "p2"

    def test_get_player_unknown(self, game):
        assert game.get_player("nobody") is None


class TestTurnClock:
    def test_remaining_time_counts_down(self, game, clock):
        assert game.get_remaining_turn_time() == pytest.approx(300.0)
        clock.advance(100)
        assert game.get_remaining_turn_time() == pytest.approx(200.0)
        clock.advance(500)
        assert game.get_remaining_turn_time() == 0.0

    def test_move_resets_clock(self, game, clock):
        clock.advance(250)
        game.submit_move("p1", PASS)
        assert game.get_remaining_turn_time() == pytest.approx(300.0)

    def test_timeout_passes_for_current_player(self, game, clock):
        clock.advance(301)
        result = game.handle_timeout()
        assert result.success
        state = game.get_state()
        assert state.moves[-1].action is MoveType.PASS
        assert state.moves[-1].player_id == "p1"
        assert state.current_player.id == "p2"

    def test_timeout_ignored_while_paused(self, game, clock, caplog):
        game.pause()
        clock.advance(301)
        with caplog.at_level(logging.INFO, logger="wordrack.game.engine"):
            result = game.handle_timeout()
        assert result.error == NOT_ACTIVE
        assert game.get_state().moves == []
        assert "timed out" not in caplog.text

    def test_timeout_ignored_while_waiting(self, settings, lexicon, clock):
        g = new_game(settings, lexicon=lexicon, clock=clock)
        g.add_player("p1", "Ann", 100)
        assert g.handle_timeout().error == NOT_ACTIVE

    def test_pause_and_resume(self, game, clock):
        assert game.pause()
        assert game.status is GameStatus.PAUSED
        assert game.submit_move("p1", PASS).error == NOT_ACTIVE
        assert game.get_remaining_turn_time() == 0.0
        clock.advance(1000)
        assert game.resume()
        assert game.get_remaining_turn_time() == pytest.approx(300.0)
        assert game.submit_move("p1", PASS).success

    def test_pause_only_when_active(self, settings, lexicon, clock):
        g = new_game(settings, lexicon=lexicon, clock=clock)
        assert g.pause() is False
        assert g.resume() is False
