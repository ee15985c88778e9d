"""Output renderers for breakdown reports."""
