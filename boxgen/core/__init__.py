from .regenerate import GENERATION_FAILED_MESSAGE, RegenOutcome, RegenStatus, Regenerator

__all__ = ["GENERATION_FAILED_MESSAGE", "RegenOutcome", "RegenStatus", "Regenerator"]
