"""Provisioning steps, in the order they are meant to run.

Each step depends on resources created by the steps before it:
resource group -> network -> security group -> network interface -> VM,
and independently resource group -> storage -> blob transfer.
"""

from cloudinfra.steps import (
    blob_transfer,
    network,
    network_interface,
    resource_group,
    security_group,
    storage,
    virtual_machine,
)
from cloudinfra.steps.context import Step, StepContext
from cloudinfra.steps.runner import run_steps, select_steps

STEPS = [
    Step(1, resource_group.NAME, "Resource group", resource_group.run),
    Step(2, network.NAME, "Virtual network and subnet", network.run),
    Step(3, security_group.NAME, "Network security group", security_group.run),
    Step(
        4,
        network_interface.NAME,
        "Public IP and network interface",
        network_interface.run,
    ),
    Step(5, virtual_machine.NAME, "Virtual machine", virtual_machine.run),
    Step(6, storage.NAME, "Storage account and container", storage.run),
    Step(7, blob_transfer.NAME, "Blob transfer check", blob_transfer.run),
]

__all__ = [
    "STEPS",
    "Step",
    "StepContext",
    "run_steps",
    "select_steps",
]
