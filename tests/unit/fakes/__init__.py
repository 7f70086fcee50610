"""Test doubles for ec2dev."""
