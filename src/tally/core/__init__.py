"""Core of tally: IR, expression language, errors, and configuration."""
