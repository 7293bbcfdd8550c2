"""Parsers for go.sum and go command output."""
