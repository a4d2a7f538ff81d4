"""Readers for the `questions` and `responses` collections."""
