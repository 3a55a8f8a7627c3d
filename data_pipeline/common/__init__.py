"""Shared season arithmetic and pipeline exceptions."""
