"""Command-line front end for repotree."""
