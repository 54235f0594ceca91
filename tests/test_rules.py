"""Tests covering the game manager and the Gymnasium environment."""

from __future__ import annotations

import numpy as np
import pytest

from ifactor.game.board import Board
from ifactor.game.rules import IFactorEnv, IFactorGame
from ifactor.utils import GameResult, Player

# Seed 4, then player one claims 8, 9, 10 and 12 while player two takes 6, 15 and 4
PLAYER_ONE_WINS = [4, 2, 3, 3, 5, 2, 2, 6]


def play(game: IFactorGame, choices: list[int]) -> None:
    for choice in choices:
        assert game.make_move(choice), f"{choice} rejected"


def test_scripted_game_ends_with_row_win() -> None:
    game = IFactorGame()
    play(game, PLAYER_ONE_WINS)

    assert game.is_game_over()
    assert game.get_winner() == Player.ONE
    assert game.board.get_winning_line() == [8, 9, 10, 12]
    assert game.board.claimed_cells() == {
        8: Player.ONE, 6: Player.TWO, 9: Player.ONE, 15: Player.TWO,
        10: Player.ONE, 4: Player.TWO, 12: Player.ONE,
    }


def test_game_starts_with_player_two_seed() -> None:
    game = IFactorGame()

    assert game.is_seed_turn()
    assert game.get_current_player() == Player.TWO

    game.make_move(5)

    assert not game.is_seed_turn()
    assert game.get_current_player() == Player.ONE
    assert game.get_last_move() == 5


def test_make_move_rejects_taken_product() -> None:
    game = IFactorGame()
    play(game, [4, 2])  # player one claims 8

    assert not game.make_move(4)  # 4 * 2 = 8
    assert game.get_last_move() == 2
    assert game.get_current_player() == Player.TWO


@pytest.mark.parametrize("choice", [0, 10, -3])
def test_make_move_rejects_out_of_range(choice: int) -> None:
    game = IFactorGame()
    assert not game.make_move(choice)
    assert game.is_seed_turn()


def test_no_moves_after_game_over() -> None:
    game = IFactorGame()
    play(game, PLAYER_ONE_WINS)

    assert not game.make_move(1)
    assert game.get_winner() == Player.ONE


def test_draw_is_detected_after_move() -> None:
    cells = {2: Player.ONE, 3: Player.TWO, 4: Player.TWO, 5: Player.ONE,
             6: Player.ONE, 7: Player.TWO, 8: Player.TWO, 9: Player.ONE}
    game = IFactorGame(Board.from_cells(cells, last_move=1, current_player=Player.ONE))

    assert game.get_valid_moves() == [1]
    assert game.make_move(1)  # claims 1, leaving 1 * n all taken

    assert game.is_game_over()
    assert game.board.game_result == GameResult.DRAW
    assert game.get_winner() is None


def test_undo_restores_previous_state() -> None:
    game = IFactorGame()
    play(game, [4, 2, 3])

    assert game.undo_move()

    assert game.board[6] == Player.EMPTY
    assert game.get_last_move() == 2
    assert game.get_current_player() == Player.TWO


def test_undo_back_to_seed_and_past_it() -> None:
    game = IFactorGame()
    play(game, [4])

    assert game.undo_move()
    assert game.is_seed_turn()
    assert game.get_current_player() == Player.TWO
    assert not game.undo_move()


def test_undo_reopens_finished_game() -> None:
    game = IFactorGame()
    play(game, PLAYER_ONE_WINS)

    game.undo_move()

    assert not game.is_game_over()
    assert game.board[12] == Player.EMPTY


def test_reset_clears_history() -> None:
    game = IFactorGame()
    play(game, [4, 2, 3])

    game.reset()

    assert game.is_seed_turn()
    assert game.board.claimed_cells() == {}
    assert not game.undo_move()


def test_env_spaces() -> None:
    env = IFactorEnv()
    observation, info = env.reset(seed=0)

    assert env.action_space.n == 9
    assert observation.shape == (6, 6)
    assert observation.dtype == np.int8
    assert env.observation_space.contains(observation)
    assert info['valid_moves'] == list(range(1, 10))
    assert info['current_player'] == Player.TWO.value


def test_env_plays_scripted_game() -> None:
    env = IFactorEnv()
    env.reset()

    for choice in PLAYER_ONE_WINS[:-1]:
        _, reward, terminated, truncated, _ = env.step(choice - 1)
        assert not terminated and not truncated
        assert reward == env.reward_step

    observation, reward, terminated, truncated, info = env.step(PLAYER_ONE_WINS[-1] - 1)

    assert terminated
    assert not truncated
    assert reward == env.reward_win
    assert info['game_result'] == GameResult.PLAYER_ONE_WIN.name
    assert info['winning_line'] == [8, 9, 10, 12]
    assert list(observation[1]) == [0, 1, 1, 1, 1, 0]


def test_env_rejects_illegal_action() -> None:
    env = IFactorEnv()
    env.reset()
    env.step(3)  # seed 4
    env.step(1)  # claims 8

    observation, reward, terminated, truncated, info = env.step(3)  # 4 * 2 = 8 again

    assert reward == env.reward_invalid_move
    assert not terminated
    assert truncated
    assert info['invalid_move']
    assert info['last_move'] == 2
    assert observation[1, 1] == Player.ONE.value


def test_env_action_masks_follow_available_moves() -> None:
    env = IFactorEnv()
    env.reset()
    env.step(2)  # seed 3
    env.step(0)  # claims 3

    # last move is 1, so the choice 3 would reuse cell 3
    mask = env.action_masks()
    assert not mask[2]
    assert mask.sum() == 8


def test_env_ascii_render() -> None:
    env = IFactorEnv(render_mode="ascii")
    env.reset()
    assert env.render() == Board().render()


def test_env_random_games_terminate() -> None:
    env = IFactorEnv()
    rng = np.random.default_rng(7)

    for _ in range(20):
        env.reset()
        terminated = False
        steps = 0
        while not terminated:
            legal = np.flatnonzero(env.action_masks())
            _, _, terminated, truncated, _ = env.step(int(rng.choice(legal)))
            assert not truncated
            steps += 1
        assert steps <= 37
        assert env.game.is_game_over()
