"""
kr-tracker: entity deletion engine for an OKR and initiative tracker.

Plans the cascade of deleting one organization, team, pod, person, function,
objective, key result or initiative, previews it, and applies it to produce
the next consistent snapshot.
"""

__version__ = "0.1.0"
