"""Merge a feature branch into the default branch, tag the merge and push."""
