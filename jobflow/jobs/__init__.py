"""Boundary to the remote job-intake API.

The wizard never talks HTTP directly; it is handed a :class:`JobIntake`.
"""
