"""Tests for :mod:`login_auth`."""
