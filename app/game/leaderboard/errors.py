class LeaderboardError(Exception):
    pass


class StudentNotFoundError(LeaderboardError):
    pass
