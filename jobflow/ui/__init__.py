"""Thin UI layer.

This package contains the Streamlit wizard that:
- collects job settings step by step
- submits the finished draft
- shows recent submission outcomes

Business logic should live in jobflow.core and jobflow.workflow.
"""
