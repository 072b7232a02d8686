"""Command line interface for monomegrid."""
