"""Tests for the Door Security integration."""
