"""
Prime points game package.

Components:
- primality: is_prime() used for scoring
- referee: game state, move application, scoring and win check
- greedy_opponent/random_opponent/user_opponent: the players that pick addends
- game: runner that drives two players through a referee, with delay, logging and history export
- messages: display strings for log entries (en/ja)
"""
# Package exports are intentionally minimal; import modules directly as needed.
