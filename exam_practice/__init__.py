"""Exam practice service: test authoring, server-side grading and results."""
