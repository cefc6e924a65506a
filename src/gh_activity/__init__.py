"""GitHub 유저 활동 요약 도구."""

__version__ = "0.1.0"
