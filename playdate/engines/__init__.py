"""Mini-game engines.

Each module exposes `start(*, rng, rules)` and a pure `transition(state, event, *, rng, rules)`
returning an `Applied` (next state + effects). I/O is left to `playdate.core.driver.EngineDriver`.
"""
