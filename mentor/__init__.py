"""Mentor platform backend - pre-onboarding and plan engine."""
