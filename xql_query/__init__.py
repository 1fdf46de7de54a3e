"""XQL query client package root."""
