"""Templates written by ``ec2dev init``."""

CONFIG_TEMPLATE = """\
# ec2dev settings
#
# Instance to toggle between running and stopped.
instance_id: i-0123456789abcdef0

# Optional region override. Without it the AWS CLI default region is used.
# region: ap-northeast-1

# SSH host entry written to ~/.ssh/config whenever the instance starts.
# Remove 'name' to leave the SSH config untouched.
name: ec2dev
user: ubuntu
credential: ~/.ssh/ec2dev.pem
port: 8080
"""
