"""Broadcast channel interface and the in-process hub implementation."""
