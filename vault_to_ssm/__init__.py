"""Copy secrets from HashiCorp Vault KV mounts into AWS SSM Parameter Store."""

__version__ = "0.1.0"
