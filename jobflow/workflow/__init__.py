"""Stateful orchestration of the job creation wizard.

- ``state``: the draft store and its step transitions
- ``submission``: the submit-and-track controller
- ``events``: JSONL submission log and the navigation signal
"""
