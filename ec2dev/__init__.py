"""ec2dev - toggle a development EC2 instance and keep ~/.ssh/config current."""

__version__ = "0.1.0"
