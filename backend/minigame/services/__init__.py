"""Domain services: accounts, sessions, scores and leaderboards.

Plain functions imported by HTTP routes and CLI commands, keeping transport
concerns separated from account rules and leaderboard queries. They return
model objects or small dataclasses and raise ``minigame.errors`` failures.
"""
