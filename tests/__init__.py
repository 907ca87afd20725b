"""Tests for pytoon."""
