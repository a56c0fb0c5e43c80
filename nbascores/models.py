from dataclasses import dataclass


@dataclass(frozen=True)
class TeamResult:
    name: str
    points: int


@dataclass(frozen=True)
class GameRecord:
    """One finished (or in-progress) game as read off the scoreboard page."""
    date: str
    status: str
    home_team_name: str
    visitor_team_name: str
    home_score: int
    visitor_score: int

    @property
    def is_final(self) -> bool:
        return self.status == 'Final'

    def summary(self) -> str:
        """Single-line form used in log output."""
        return (f"{self.visitor_team_name} {self.visitor_score} @ "
                f"{self.home_team_name} {self.home_score} ({self.status})")
