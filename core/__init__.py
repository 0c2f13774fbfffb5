"""Partnerships Careers backend project package."""
