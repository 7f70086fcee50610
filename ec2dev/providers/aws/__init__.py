"""AWS provider implementation for ec2dev."""

from ec2dev.providers.aws.compute import EC2Manager

__all__ = ["EC2Manager"]
