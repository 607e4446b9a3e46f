# app/payouts/state_machine.py

class InvalidTransition(Exception):
    pass


IDLE = "IDLE"
RUNNING = "RUNNING"
COMPLETED = "COMPLETED"
CANCELLED = "CANCELLED"

ALLOWED = {
    IDLE: {RUNNING},
    RUNNING: {COMPLETED, CANCELLED},
    COMPLETED: set(),
    CANCELLED: set(),
}

TERMINAL_STATES = (COMPLETED, CANCELLED)


def assert_transition(old: str, new: str) -> None:
    if new not in ALLOWED.get(old, set()):
        raise InvalidTransition(f"Illegal batch transition: {old} -> {new}")
