"""Connector package - Command execution against the reviewed host."""

from magento_doctor.connector.base import CommandError, CommandResult, Connector
from magento_doctor.connector.local import LocalConnector
from magento_doctor.connector.ssh import SSHConfig, SSHConnector

__all__ = [
    "CommandError",
    "CommandResult",
    "Connector",
    "LocalConnector",
    "SSHConfig",
    "SSHConnector",
]
