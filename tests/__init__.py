"""Test suite for AI Form Assist."""
