"""Test suite for aoaicli."""
