"""Team state, one per team, keyed by name in the registry."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TeamState(BaseModel):
    """Accumulated damage and smash counters for a single team.

    ``damage`` doubles as the probability that a smash against this team
    lands, so values above 1.0 mean a certain hit.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    name: str
    damage: float = 0.0
    up: int = Field(default=0, ge=0)  # teams this team has smashed
    down: int = Field(default=0, ge=0)  # times this team has been smashed


Teams = dict[str, TeamState]


def copy_teams(teams: Teams) -> Teams:
    """Copy a registry so the caller never shares state objects with the live game."""
    return {name: state.model_copy() for name, state in teams.items()}
