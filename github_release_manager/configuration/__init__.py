"""Command line interface and configuration reconciliation."""
