import random
import unittest

from primegame.referee import (
    Actor,
    GameAlreadyFinished,
    GameState,
    GameStatus,
    InvalidAddend,
    LogEntry,
    NotYourTurn,
    Referee,
    TARGET_SCORE,
)


def _play_until_finished(ref: Referee, rng: random.Random, max_moves: int = 10_000):
    for _ in range(max_moves):
        if ref.is_finished:
            return
        ref.apply_move(ref.active_actor, rng.randint(1, 5))
    raise AssertionError("game did not finish")


class RefereeTests(unittest.TestCase):
    def test_fresh_state_defaults(self):
        state = Referee().current_state()
        self.assertEqual(state.current_sum, 0)
        self.assertEqual(dict(state.scores), {Actor.HUMAN: 0, Actor.OPPONENT: 0})
        self.assertIs(state.active_actor, Actor.HUMAN)
        self.assertEqual(state.log, ())
        self.assertIs(state.status, GameStatus.IN_PROGRESS)
        self.assertIsNone(state.winner)
        self.assertEqual(state, GameState())

    def test_example_game_human_three_then_opponent_four(self):
        ref = Referee()
        first = ref.apply_move(Actor.HUMAN, 3)
        self.assertEqual(first.entry, LogEntry(Actor.HUMAN, 3, 3, True, 3))
        self.assertIs(first.active_actor, Actor.OPPONENT)

        second = ref.apply_move(Actor.OPPONENT, 4)
        self.assertEqual(second.entry, LogEntry(Actor.OPPONENT, 4, 7, True, 7))

        state = ref.current_state()
        self.assertEqual(state.current_sum, 7)
        self.assertEqual(dict(state.scores), {Actor.HUMAN: 3, Actor.OPPONENT: 7})
        self.assertIs(state.active_actor, Actor.HUMAN)
        self.assertIs(state.status, GameStatus.IN_PROGRESS)

    def test_non_prime_sum_awards_nothing(self):
        ref = Referee()
        out = ref.apply_move(Actor.HUMAN, 4)
        self.assertFalse(out.entry.scored)
        self.assertEqual(out.entry.points_awarded, 0)
        self.assertEqual(out.scores[Actor.HUMAN], 0)

    def test_actor_may_be_given_by_value(self):
        ref = Referee()
        out = ref.apply_move("human", 2)
        self.assertIs(out.entry.actor, Actor.HUMAN)
        self.assertIs(out.active_actor, Actor.OPPONENT)

    def test_invariants_hold_over_random_games(self):
        for seed in range(25):
            rng = random.Random(seed)
            ref = Referee()
            addends = []
            expected_actor = Actor.HUMAN
            while not ref.is_finished:
                self.assertIs(ref.active_actor, expected_actor)
                n = rng.randint(1, 5)
                before = ref.current_sum
                out = ref.apply_move(expected_actor, n)
                addends.append(n)
                self.assertGreater(out.current_sum, before)
                self.assertEqual(out.current_sum, sum(addends))
                state = ref.current_state()
                for a in Actor:
                    self.assertEqual(state.scores[a], sum(e.points_awarded for e in state.log if e.actor is a))
                if not ref.is_finished:
                    expected_actor = expected_actor.other

    def test_finishing_move_sets_winner_and_keeps_turn(self):
        ref = Referee()
        _play_until_finished(ref, random.Random(3))
        state = ref.current_state()
        last = state.log[-1]
        self.assertIs(state.status, GameStatus.FINISHED)
        self.assertIs(state.winner, last.actor)
        self.assertIs(state.active_actor, last.actor)
        self.assertTrue(last.scored)
        self.assertGreaterEqual(state.scores[state.winner], TARGET_SCORE)
        self.assertLess(state.scores[state.winner.other], TARGET_SCORE)
        # Before the last move the winner was still below target
        self.assertLess(state.scores[state.winner] - last.points_awarded, TARGET_SCORE)

    def test_moves_after_finish_are_rejected(self):
        ref = Referee()
        _play_until_finished(ref, random.Random(11))
        before = ref.current_state()
        for actor in Actor:
            with self.assertRaises(GameAlreadyFinished):
                ref.apply_move(actor, 1)
        self.assertEqual(ref.current_state(), before)

    def test_wrong_actor_is_rejected_without_mutation(self):
        ref = Referee()
        before = ref.current_state()
        with self.assertRaises(NotYourTurn) as cm:
            ref.apply_move(Actor.OPPONENT, 2)
        self.assertEqual(cm.exception.kind, "not_your_turn")
        self.assertEqual(ref.current_state(), before)

    def test_unknown_actor_is_an_engine_error_without_mutation(self):
        ref = Referee()
        ref.apply_move(Actor.HUMAN, 3)
        before = ref.current_state()
        for bad in ("computer", "", None, 7):
            with self.subTest(bad=bad):
                with self.assertRaises(NotYourTurn):
                    ref.apply_move(bad, 2)
                self.assertEqual(ref.current_state(), before)

    def test_unknown_actor_on_finished_game_reports_finished(self):
        ref = Referee()
        _play_until_finished(ref, random.Random(2))
        with self.assertRaises(GameAlreadyFinished):
            ref.apply_move("computer", 1)

    def test_snapshots_compare_by_value_but_are_unhashable(self):
        ref = Referee()
        out = ref.apply_move(Actor.HUMAN, 2)
        self.assertEqual(ref.current_state(), ref.current_state())
        with self.assertRaises(TypeError):
            hash(ref.current_state())
        with self.assertRaises(TypeError):
            hash(out)
        self.assertIsInstance(hash(out.entry), int)

    def test_invalid_addends_are_rejected_without_mutation(self):
        ref = Referee()
        ref.apply_move(Actor.HUMAN, 1)
        before = ref.current_state()
        for bad in (0, 6, -1, 100, 2.5, "3", None, True):
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidAddend):
                    ref.apply_move(Actor.OPPONENT, bad)
                self.assertEqual(ref.current_state(), before)

    def test_snapshots_are_read_only(self):
        ref = Referee()
        ref.apply_move(Actor.HUMAN, 2)
        state = ref.current_state()
        with self.assertRaises(TypeError):
            state.scores[Actor.HUMAN] = 1000  # type: ignore[index]
        with self.assertRaises(AttributeError):
            state.current_sum = 99  # type: ignore[misc]
        self.assertEqual(ref.current_state().scores[Actor.HUMAN], 2)

    def test_reset_returns_fresh_defaults(self):
        ref = Referee()
        _play_until_finished(ref, random.Random(5))
        fresh = ref.reset()
        self.assertEqual(fresh, Referee().current_state())
        self.assertEqual(ref.current_state(), GameState())
        ref.apply_move(Actor.HUMAN, 5)
        self.assertEqual(ref.current_sum, 5)


if __name__ == "__main__":
    unittest.main()
