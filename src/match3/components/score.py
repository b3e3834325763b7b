from dataclasses import dataclass

@dataclass(slots=True)
class Score:
    """Running score for the session. Only ever grows until a restart resets it."""
    value: int = 0
