"""Command line entry point for ec2dev."""
