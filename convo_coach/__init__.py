"""Conversation practice coach."""
