"""Threshold gating and the submission pipeline."""
